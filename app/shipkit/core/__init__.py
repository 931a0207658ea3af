"""Core engine: version arithmetic, deployment ledger and drift detection."""
