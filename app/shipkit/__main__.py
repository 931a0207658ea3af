"""Allow running shipkit as ``python -m shipkit``."""

from shipkit.cli.main import app

if __name__ == "__main__":
    app()
