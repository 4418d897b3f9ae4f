"""
Shared test fixtures and configuration.
"""

import os
from pathlib import Path

import pytest

from boxinstaller.adapters.mock import MockRunner
from boxinstaller.core.context import HostContext
from boxinstaller.core.models.config import InstallerConfig


def make_executable(bin_dir: Path, name: str, body: str = "exit 0\n") -> Path:
    """Drop a stub executable into ``bin_dir``."""
    path = bin_dir / name
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(0o755)
    return path


@pytest.fixture
def fake_bin(tmp_path: Path) -> Path:
    """An empty directory used as the only PATH entry."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    return bin_dir


@pytest.fixture
def home(tmp_path: Path) -> Path:
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    return home_dir


@pytest.fixture
def host_ctx(fake_bin: Path, home: Path) -> HostContext:
    """A context that sees only ``fake_bin`` on PATH, with bash as login shell."""
    return HostContext(
        path_entries=[str(fake_bin)],
        home=home,
        environ={"SHELL": "/bin/bash", "USER": "tester", "HOME": str(home)},
        is_root=False,
    )


@pytest.fixture
def mock_runner() -> MockRunner:
    return MockRunner()


@pytest.fixture
def script_dir(tmp_path: Path) -> Path:
    path = tmp_path / "scripts"
    path.mkdir()
    return path


@pytest.fixture
def config(script_dir: Path) -> InstallerConfig:
    """Default configuration with install scripts written to a temp dir."""
    return InstallerConfig(script_dir=str(script_dir))


@pytest.fixture
def ready_host(fake_bin: Path) -> Path:
    """A host with bash, curl, wget, apt-get and podman but no distrobox."""
    for name in ("bash", "curl", "wget", "apt-get", "podman"):
        make_executable(fake_bin, name)
    return fake_bin


def listing(*names: str) -> str:
    """A ``distrobox list`` table containing ``names``."""
    rows = ["ID           | NAME                 | STATUS             | IMAGE"]
    for i, name in enumerate(names):
        rows.append(f"{i:012x} | {name:<20} | Up 2 hours         | ubuntu:latest")
    return "\n".join(rows) + "\n"


@pytest.fixture
def bash_path() -> str:
    """Absolute path of the real bash, for tests that execute scripts."""
    for candidate in ("/bin/bash", "/usr/bin/bash"):
        if os.path.exists(candidate):
            return candidate
    pytest.skip("bash not available")
