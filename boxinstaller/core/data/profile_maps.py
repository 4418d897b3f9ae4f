"""
L0 Data — Shell profile/rc file mappings.

Maps shell kinds to their startup file, relative to the home directory.
ksh is resolved at lookup time: ``~/.kshrc`` when it exists, else the
fallback.
"""

from __future__ import annotations

from boxinstaller.core.models.host import ShellKind

_PROFILE_MAP: dict[ShellKind, str] = {
    ShellKind.BASH: ".bashrc",
    ShellKind.ZSH: ".zshrc",
    ShellKind.FISH: ".config/fish/config.fish",
    ShellKind.KSH: ".kshrc",
    ShellKind.TCSH: ".cshrc",
    ShellKind.CSH: ".cshrc",
    ShellKind.OTHER: ".profile",
}

# Used for ksh without a ~/.kshrc, and for anything unmapped
_FALLBACK_PROFILE = ".profile"
