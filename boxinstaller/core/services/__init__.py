"""Core services — the provisioning workflow's building blocks."""
