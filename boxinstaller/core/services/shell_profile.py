"""
Shell profile editor — persist a PATH entry in the user's startup file.

Each shell kind maps to one startup file and one of three PATH syntaxes
(POSIX ``export``, fish ``fish_add_path``, csh ``set path``).  Appending
is idempotent: an entry already present in the file is never repeated.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from pathlib import Path
from typing import Any

from boxinstaller.core.context import HostContext
from boxinstaller.core.data.profile_maps import _FALLBACK_PROFILE, _PROFILE_MAP
from boxinstaller.core.models.host import ShellKind

logger = logging.getLogger(__name__)


class PathSyntax(Enum):
    """How a shell spells "prepend this directory to PATH"."""

    POSIX = "posix"
    FISH = "fish"
    CSH = "csh"

    @classmethod
    def for_shell(cls, shell: ShellKind) -> PathSyntax:
        if shell is ShellKind.FISH:
            return cls.FISH
        if shell in (ShellKind.CSH, ShellKind.TCSH):
            return cls.CSH
        return cls.POSIX

    def format_line(self, directory: str) -> str:
        return _FORMATTERS[self](directory)

    def matches(self, text: str, directory: str) -> bool:
        return _MATCHERS[self](text, directory)


def _posix_line(directory: str) -> str:
    return f'export PATH="{directory}:$PATH"'


def _fish_line(directory: str) -> str:
    return f"fish_add_path {directory}"


def _csh_line(directory: str) -> str:
    return f"set path = ({directory} $path)"


def _mentions(text: str, directory: str) -> bool:
    return directory in text


def _fish_mentions(text: str, directory: str) -> bool:
    return re.search(rf"fish_add_path.*{re.escape(directory)}", text) is not None


_FORMATTERS = {
    PathSyntax.POSIX: _posix_line,
    PathSyntax.FISH: _fish_line,
    PathSyntax.CSH: _csh_line,
}

_MATCHERS = {
    PathSyntax.POSIX: _mentions,
    PathSyntax.FISH: _fish_mentions,
    PathSyntax.CSH: _mentions,
}


def config_file_for(shell: ShellKind, home: Path) -> Path:
    """Return the startup file a shell reads, under ``home``.

    ksh uses ``~/.kshrc`` only when it already exists, else ``~/.profile``.
    """
    relative = _PROFILE_MAP.get(shell, _FALLBACK_PROFILE)
    if shell is ShellKind.KSH and not (home / relative).is_file():
        relative = _FALLBACK_PROFILE
    return home / relative


def path_line_for(shell: ShellKind, directory: str) -> str:
    """The line that prepends ``directory`` to PATH in ``shell``'s syntax."""
    return PathSyntax.for_shell(shell).format_line(directory)


def has_path_entry(shell: ShellKind, text: str, directory: str) -> bool:
    """Whether startup-file ``text`` already extends PATH with ``directory``."""
    return PathSyntax.for_shell(shell).matches(text, directory)


def ensure_path_entry(
    directory: str,
    shell: ShellKind,
    ctx: HostContext,
) -> dict[str, Any]:
    """Persist ``directory`` on PATH for ``shell`` and apply it to ``ctx``.

    The context PATH is updated in every case so later steps of this run
    find binaries in ``directory``; the startup file only affects new
    sessions, hence the reload notice.

    Returns::

        {"ok": True, "config_file": "/home/u/.bashrc", "added": True,
         "notice": "Please restart your shell or run: source /home/u/.bashrc"}
        or
        {"ok": False, "config_file": "...", "error": "Cannot write ..."}
    """
    config_file = config_file_for(shell, ctx.home)
    ctx.prepend_path(directory)

    existing = ""
    if config_file.is_file():
        try:
            existing = config_file.read_text(encoding="utf-8")
        except OSError as e:
            return {"ok": False, "config_file": str(config_file), "error": f"Cannot read {config_file}: {e}"}

    if has_path_entry(shell, existing, directory):
        logger.info("PATH already contains %s in %s", directory, config_file)
        return {
            "ok": True,
            "config_file": str(config_file),
            "added": False,
            "notice": f"PATH already contains {directory}",
        }

    line = path_line_for(shell, directory)
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with config_file.open("a", encoding="utf-8") as f:
            if existing and not existing.endswith("\n"):
                f.write("\n")
            f.write(line + "\n")
    except OSError as e:
        return {"ok": False, "config_file": str(config_file), "error": f"Cannot write {config_file}: {e}"}

    logger.info("Added %s to PATH in %s", directory, config_file)
    return {
        "ok": True,
        "config_file": str(config_file),
        "added": True,
        "line": line,
        "notice": f"Please restart your shell or run: source {config_file}",
    }
