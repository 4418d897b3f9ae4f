"""
Tests for the shell profile editor — startup files and PATH lines.
"""

import pytest

from boxinstaller.core.models.host import ShellKind
from boxinstaller.core.services.shell_profile import (
    PathSyntax,
    config_file_for,
    ensure_path_entry,
    has_path_entry,
    path_line_for,
)

LOCAL_BIN = "/home/tester/.local/bin"


class TestConfigFileFor:
    @pytest.mark.parametrize("shell, relative", [
        (ShellKind.BASH, ".bashrc"),
        (ShellKind.ZSH, ".zshrc"),
        (ShellKind.FISH, ".config/fish/config.fish"),
        (ShellKind.TCSH, ".cshrc"),
        (ShellKind.CSH, ".cshrc"),
        (ShellKind.OTHER, ".profile"),
    ])
    def test_mapping(self, home, shell, relative):
        assert config_file_for(shell, home) == home / relative

    def test_ksh_without_kshrc_uses_profile(self, home):
        assert config_file_for(ShellKind.KSH, home) == home / ".profile"

    def test_ksh_with_kshrc(self, home):
        (home / ".kshrc").write_text("# ksh\n")
        assert config_file_for(ShellKind.KSH, home) == home / ".kshrc"


class TestPathSyntax:
    def test_for_shell(self):
        assert PathSyntax.for_shell(ShellKind.BASH) is PathSyntax.POSIX
        assert PathSyntax.for_shell(ShellKind.OTHER) is PathSyntax.POSIX
        assert PathSyntax.for_shell(ShellKind.FISH) is PathSyntax.FISH
        assert PathSyntax.for_shell(ShellKind.TCSH) is PathSyntax.CSH

    def test_lines(self):
        assert path_line_for(ShellKind.ZSH, LOCAL_BIN) == f'export PATH="{LOCAL_BIN}:$PATH"'
        assert path_line_for(ShellKind.FISH, LOCAL_BIN) == f"fish_add_path {LOCAL_BIN}"
        assert path_line_for(ShellKind.CSH, LOCAL_BIN) == f"set path = ({LOCAL_BIN} $path)"

    def test_posix_matches_any_mention(self):
        assert has_path_entry(ShellKind.BASH, f"PATH={LOCAL_BIN}:$PATH\n", LOCAL_BIN)
        assert not has_path_entry(ShellKind.BASH, "alias ll='ls -l'\n", LOCAL_BIN)

    def test_fish_needs_fish_add_path(self):
        assert has_path_entry(ShellKind.FISH, f"fish_add_path -g {LOCAL_BIN}\n", LOCAL_BIN)
        assert not has_path_entry(ShellKind.FISH, f"# {LOCAL_BIN}\n", LOCAL_BIN)


class TestEnsurePathEntry:
    def test_appends_to_bashrc(self, host_ctx, home):
        result = ensure_path_entry(LOCAL_BIN, ShellKind.BASH, host_ctx)

        assert result["ok"]
        assert result["added"]
        assert result["config_file"] == str(home / ".bashrc")
        assert "source" in result["notice"]
        assert (home / ".bashrc").read_text() == f'export PATH="{LOCAL_BIN}:$PATH"\n'

    def test_idempotent(self, host_ctx, home):
        ensure_path_entry(LOCAL_BIN, ShellKind.BASH, host_ctx)
        second = ensure_path_entry(LOCAL_BIN, ShellKind.BASH, host_ctx)

        assert second["ok"]
        assert not second["added"]
        assert (home / ".bashrc").read_text().count(LOCAL_BIN) == 1

    def test_keeps_existing_content(self, host_ctx, home):
        (home / ".zshrc").write_text("setopt autocd")
        ensure_path_entry(LOCAL_BIN, ShellKind.ZSH, host_ctx)

        lines = (home / ".zshrc").read_text().splitlines()
        assert lines == ["setopt autocd", f'export PATH="{LOCAL_BIN}:$PATH"']

    def test_fish_creates_config_dir(self, host_ctx, home):
        result = ensure_path_entry(LOCAL_BIN, ShellKind.FISH, host_ctx)

        config = home / ".config" / "fish" / "config.fish"
        assert result["added"]
        assert config.read_text() == f"fish_add_path {LOCAL_BIN}\n"

    def test_csh_syntax(self, host_ctx, home):
        host_ctx.environ["SHELL"] = "/bin/tcsh"
        ensure_path_entry(LOCAL_BIN, ShellKind.TCSH, host_ctx)
        assert (home / ".cshrc").read_text() == f"set path = ({LOCAL_BIN} $path)\n"

    def test_updates_context_path(self, host_ctx, fake_bin):
        ensure_path_entry(LOCAL_BIN, ShellKind.BASH, host_ctx)
        assert host_ctx.path_entries[0] == LOCAL_BIN
        assert host_ctx.path_entries.count(LOCAL_BIN) == 1
        assert str(fake_bin) in host_ctx.path_entries

    def test_context_updated_even_when_file_has_entry(self, host_ctx, home):
        (home / ".bashrc").write_text(f'export PATH="{LOCAL_BIN}:$PATH"\n')
        result = ensure_path_entry(LOCAL_BIN, ShellKind.BASH, host_ctx)

        assert not result["added"]
        assert LOCAL_BIN in host_ctx.path_entries

    def test_unwritable_file_reports_error(self, host_ctx, home):
        # a directory where the startup file should be
        (home / ".bashrc").mkdir()
        result = ensure_path_entry(LOCAL_BIN, ShellKind.BASH, host_ctx)

        assert not result["ok"]
        assert "Cannot write" in result["error"]
