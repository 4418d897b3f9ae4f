"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from boxinstaller.core.models import CommandResult, HostEnvironment, InstallerConfig
"""

from boxinstaller.core.models.config import (
    AppConfig,
    InstallerConfig,
    RepositoryConfig,
    SandboxConfig,
    TimeoutConfig,
    ToolConfig,
)
from boxinstaller.core.models.host import HostEnvironment, PackageManagerKind, ShellKind
from boxinstaller.core.models.result import CommandResult
from boxinstaller.core.models.sandbox import (
    RecreatePolicy,
    SandboxDecision,
    SandboxEnvironment,
)

__all__ = [
    "AppConfig",
    "CommandResult",
    "HostEnvironment",
    "InstallerConfig",
    "PackageManagerKind",
    "RecreatePolicy",
    "RepositoryConfig",
    "SandboxConfig",
    "SandboxDecision",
    "SandboxEnvironment",
    "ShellKind",
    "TimeoutConfig",
    "ToolConfig",
]
