"""
Host model — what the prober found on this machine.

Derived once per run by ``host_probe.probe_host`` and read-only afterwards.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class PackageManagerKind(str, Enum):
    """Host package managers the installer knows how to drive."""

    APT = "apt"
    DNF = "dnf"
    YUM = "yum"
    PACMAN = "pacman"
    ZYPPER = "zypper"
    APK = "apk"
    UNKNOWN = "unknown"


class ShellKind(str, Enum):
    """Interactive shells with a known startup file and PATH syntax."""

    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    KSH = "ksh"
    TCSH = "tcsh"
    CSH = "csh"
    OTHER = "other"

    @classmethod
    def from_name(cls, name: str) -> ShellKind:
        """Map a shell base name (``zsh``, ``fish``) to its kind."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            return cls.OTHER


class HostEnvironment(BaseModel):
    """Snapshot of the host's tooling."""

    model_config = ConfigDict(frozen=True)

    package_manager: PackageManagerKind = PackageManagerKind.UNKNOWN
    shell: ShellKind = ShellKind.OTHER
    shell_path: str = ""
    container_runtime: str | None = None
    has_curl: bool = False
    has_wget: bool = False
    has_bash: bool = False

    @property
    def has_container_runtime(self) -> bool:
        """Whether podman or docker is on PATH."""
        return self.container_runtime is not None

    @property
    def has_fetch_tool(self) -> bool:
        """Whether curl or wget is available for downloads."""
        return self.has_curl or self.has_wget

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "package_manager": self.package_manager.value,
            "shell": self.shell.value,
            "shell_path": self.shell_path,
            "container_runtime": self.container_runtime,
            "has_container_runtime": self.has_container_runtime,
            "has_curl": self.has_curl,
            "has_wget": self.has_wget,
            "has_bash": self.has_bash,
        }
