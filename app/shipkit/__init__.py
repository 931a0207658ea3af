"""shipkit - Deployment state and versioning for mobile release cycles.

Tracks which app version was deployed to which platform and profile,
keeps the app manifests' version fields in step, and detects drift in
build-relevant configuration between builds.
"""

__version__ = "0.1.0"
