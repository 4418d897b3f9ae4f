"""CLI sub-command groups registered by ``boxinstaller.main``."""
