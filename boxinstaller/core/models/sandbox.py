"""
Sandbox model — the single named distrobox the installer owns.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class SandboxDecision(str, Enum):
    """What ``ensure_sandbox`` did with the named sandbox."""

    CREATE = "create"       # absent → created
    REUSE = "reuse"         # present, kept as-is
    RECREATE = "recreate"   # present, removed and created fresh


class RecreatePolicy(str, Enum):
    """How to answer the recreate question when the sandbox exists."""

    ASK = "ask"
    REUSE = "reuse"
    RECREATE = "recreate"


class SandboxEnvironment(BaseModel):
    """A sandbox as seen through the container tool's listing."""

    name: str
    base_image: str = "ubuntu:latest"
    exists: bool = False

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "name": self.name,
            "base_image": self.base_image,
            "exists": self.exists,
        }
