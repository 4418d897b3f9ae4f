"""
Host context — the explicit view of the process environment for one run.

Instead of mutating ``os.environ["PATH"]`` mid-run, the workflow carries a
HostContext.  Probes resolve executables against its PATH, the shell
profile editor prepends to it, and the runner hands it to every child
process through ``env_overrides()``.  The entry point builds it once:

    - CLI:    main.py  → HostContext.from_environ()
    - Tests:  conftest → HostContext(path_entries=[fake_bin], home=tmp_path, ...)
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class HostContext:
    """PATH, home directory and environment seen by the installer."""

    path_entries: list[str] = field(default_factory=list)
    home: Path = field(default_factory=Path.home)
    environ: dict[str, str] = field(default_factory=dict)
    is_root: bool = False

    @classmethod
    def from_environ(cls) -> HostContext:
        """Snapshot the current process environment."""
        environ = dict(os.environ)
        entries = [p for p in environ.get("PATH", "").split(os.pathsep) if p]
        return cls(
            path_entries=entries,
            home=Path.home(),
            environ=environ,
            is_root=hasattr(os, "geteuid") and os.geteuid() == 0,
        )

    @property
    def path(self) -> str:
        """The effective PATH string."""
        return os.pathsep.join(self.path_entries)

    @property
    def user(self) -> str:
        return self.environ.get("USER", "") or self.environ.get("LOGNAME", "")

    def which(self, command: str) -> str | None:
        """Resolve an executable against the context PATH."""
        if not self.path_entries:
            return None
        return shutil.which(command, path=self.path)

    def has(self, command: str) -> bool:
        return self.which(command) is not None

    def expand(self, path: str) -> Path:
        """Expand a leading ``~`` against the context home directory."""
        if path == "~":
            return self.home
        if path.startswith("~/"):
            return self.home / path[2:]
        return Path(path)

    def prepend_path(self, directory: str) -> bool:
        """Put ``directory`` first on PATH for the rest of the run.

        Returns:
            True if PATH changed, False if the entry was already present.
        """
        if directory in self.path_entries:
            return False
        self.path_entries.insert(0, directory)
        return True

    def env_overrides(self) -> dict[str, str]:
        """Environment variables every child process must see."""
        return {"PATH": self.path}
