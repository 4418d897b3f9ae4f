"""
L0 Data — Package manager probes and container-tool install commands.

Probe order matters: the first executable found decides the package
manager.  Each install recipe is a list of argv commands run in order;
``{tool}`` and ``{backend}`` are filled from configuration and ``sudo``
is prepended unless running as root.
"""

from __future__ import annotations

from boxinstaller.core.models.host import PackageManagerKind

# (kind, executable probed on PATH) — highest priority first
_PM_PROBES: list[tuple[PackageManagerKind, str]] = [
    (PackageManagerKind.APT, "apt-get"),
    (PackageManagerKind.DNF, "dnf"),
    (PackageManagerKind.YUM, "yum"),
    (PackageManagerKind.PACMAN, "pacman"),
    (PackageManagerKind.ZYPPER, "zypper"),
    (PackageManagerKind.APK, "apk"),
]

_TOOL_INSTALL: dict[PackageManagerKind, list[list[str]]] = {
    PackageManagerKind.APT: [
        ["apt", "update"],
        ["apt", "install", "-y", "{tool}", "{backend}"],
    ],
    PackageManagerKind.DNF: [["dnf", "install", "-y", "{tool}", "{backend}"]],
    PackageManagerKind.YUM: [["yum", "install", "-y", "{tool}", "{backend}"]],
    PackageManagerKind.PACMAN: [["pacman", "-Sy", "--noconfirm", "{tool}", "{backend}"]],
    PackageManagerKind.ZYPPER: [["zypper", "install", "-y", "{tool}", "{backend}"]],
    PackageManagerKind.APK: [["apk", "add", "{tool}", "{backend}"]],
}

# Container backends distrobox can drive, preferred first
_CONTAINER_RUNTIMES: tuple[str, ...] = ("podman", "docker")

# Shown when the universal installer leaves the host without a backend
_BACKEND_GUIDANCE: list[str] = [
    "For most distributions, you can install podman with:",
    "  - Debian/Ubuntu: sudo apt install podman",
    "  - Fedora: sudo dnf install podman",
    "  - Arch: sudo pacman -S podman",
]
