"""
Installer configuration model — loaded from installer.yml.

Every field has a default, so an empty (or absent) installer.yml
describes the stock setup: Signal Desktop in an ``ubuntu-signal``
distrobox built from ``ubuntu:latest``.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from pydantic import BaseModel, Field, field_validator


class SandboxConfig(BaseModel):
    """The named sandbox and the container tool that manages it."""

    name: str = "ubuntu-signal"
    image: str = "ubuntu:latest"
    tool: str = "distrobox"

    @field_validator("name")
    @classmethod
    def _valid_name(cls, value: str) -> str:
        if not value or not all(c.isalnum() or c in "-_." for c in value):
            raise ValueError("sandbox name must be alphanumeric with '-', '_' or '.'")
        return value


class RepositoryConfig(BaseModel):
    """Vendor apt repository the application is installed from."""

    key_url: str = "https://updates.signal.org/desktop/apt/keys.asc"
    sources_url: str = (
        "https://updates.signal.org/static/desktop/apt/signal-desktop.sources"
    )
    keyring_path: str = "/usr/share/keyrings/signal-desktop-keyring.gpg"
    sources_path: str = "/etc/apt/sources.list.d/signal-desktop.sources"

    @property
    def keyring_file(self) -> str:
        """Local name the dearmored key is staged under before copying."""
        return PurePosixPath(self.keyring_path).name

    @property
    def sources_file(self) -> str:
        """Local name the sources descriptor is staged under."""
        return PurePosixPath(self.sources_path).name


class AppConfig(BaseModel):
    """The application installed inside the sandbox."""

    id: str = "signal-desktop"
    label: str = "Signal Desktop"
    menu_name: str = "Signal"
    extra_packages: list[str] = Field(default_factory=lambda: ["libasound2t64"])
    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)

    @property
    def packages(self) -> list[str]:
        """Packages passed to ``apt install``: the app first, then extras."""
        return [self.id, *self.extra_packages]


class ToolConfig(BaseModel):
    """How to obtain the container tool when it is missing."""

    backend: str = "podman"
    installer_url: str = (
        "https://raw.githubusercontent.com/89luca89/distrobox/main/install"
    )
    installer_sha256: str | None = None
    prefix: str = "~/.local"


class TimeoutConfig(BaseModel):
    """Per-stage timeouts in seconds. ``None`` blocks until completion."""

    tool_install: int | None = None
    sandbox: int | None = None
    install_script: int | None = None
    export: int | None = None
    query: int | None = 60


class InstallerConfig(BaseModel):
    """Root configuration — the whole of installer.yml."""

    version: int = 1

    sandbox: SandboxConfig = Field(default_factory=SandboxConfig)
    app: AppConfig = Field(default_factory=AppConfig)
    tool: ToolConfig = Field(default_factory=ToolConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    script_dir: str | None = None
