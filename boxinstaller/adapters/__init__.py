"""Adapters — bindings for the external tools the installer drives.

Public re-exports for convenient access.
"""

from boxinstaller.adapters.base import Runner
from boxinstaller.adapters.containers.distrobox import DistroboxAdapter
from boxinstaller.adapters.mock import MockCall, MockRunner
from boxinstaller.adapters.runner import SubprocessRunner

__all__ = [
    "DistroboxAdapter",
    "MockCall",
    "MockRunner",
    "Runner",
    "SubprocessRunner",
]
