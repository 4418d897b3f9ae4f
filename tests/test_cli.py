"""
Tests for CLI commands — install, detect, config, sandbox and global options.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from conftest import listing, make_executable

from boxinstaller.main import cli


@pytest.fixture
def config_file(tmp_path: Path, script_dir: Path) -> Path:
    path = tmp_path / "installer.yml"
    path.write_text(f"script_dir: {script_dir}\n")
    return path


@pytest.fixture
def invoke(config_file, host_ctx, mock_runner):
    """Invoke the CLI with the test host context and mock runner."""
    def _invoke(*args, input=None):
        return CliRunner().invoke(
            cli,
            ["--config", str(config_file), *args],
            obj={"host_context": host_ctx, "runner": mock_runner},
            input=input,
        )
    return _invoke


@pytest.fixture
def with_distrobox(fake_bin, ready_host):
    make_executable(fake_bin, "distrobox")
    return fake_bin


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "distrobox sandbox" in result.output
        for command in ("install", "detect", "config", "sandbox"):
            assert command in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_bad_config(self, tmp_path: Path):
        path = tmp_path / "installer.yml"
        path.write_text("sandbox:\n  name: 'has space'\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "install"])
        assert result.exit_code == 1
        assert "Invalid installer configuration" in result.output


class TestInstallCommand:
    @pytest.fixture(autouse=True)
    def _apt_host(self, ready_host, fake_bin, mock_runner):
        mock_runner.on_call(
            ("sudo", "apt", "install"),
            lambda cmd: make_executable(fake_bin, "distrobox"),
        )

    def test_success(self, invoke, mock_runner):
        result = invoke("install")

        assert result.exit_code == 0, result.output
        assert "=== Signal Desktop Sandbox Installer ===" in result.output
        assert "[INFO] Checking prerequisites..." in result.output
        assert "[WARNING] distrobox not found. Proceeding with installation..." in result.output
        assert "Installation completed successfully!" in result.output
        assert "distrobox enter ubuntu-signal -- signal-desktop" in result.output
        assert mock_runner.ran("distrobox", "create")

    def test_json(self, invoke):
        result = invoke("install", "--json")

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["sandbox_decision"] == "create"
        assert data["stages"][-1] == "succeeded"

    def test_failure_exit_code(self, invoke, mock_runner):
        mock_runner.set_failure(
            ("distrobox", "enter", "ubuntu-signal", "--", "distrobox-export"),
            error="no desktop file",
        )
        result = invoke("install")

        assert result.exit_code == 1
        assert "[ERROR] Application export failed (no desktop file)" in result.output
        assert "Installation completed successfully!" not in result.output

    def test_failure_json(self, invoke, mock_runner):
        mock_runner.set_failure(("distrobox", "create"), error="pull failed")
        result = invoke("install", "--json")

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["failed_stage"] == "ensure_sandbox"
        assert data["error"] == "Sandbox creation failed: pull failed"

    def test_quiet_hides_info(self, invoke):
        result = invoke("--quiet", "install")

        assert result.exit_code == 0, result.output
        assert "[INFO]" not in result.output
        assert "Sandbox Installer" not in result.output
        assert "[WARNING] distrobox not found" in result.output
        assert "Installation completed successfully!" in result.output


class TestInstallExistingSandbox:
    @pytest.fixture(autouse=True)
    def _existing(self, with_distrobox, mock_runner):
        mock_runner.set_output(("distrobox", "list"), listing("ubuntu-signal"))

    def test_non_interactive_default_reuses(self, invoke, mock_runner):
        result = invoke("install")

        assert result.exit_code == 0, result.output
        assert "Using existing sandbox 'ubuntu-signal'" in result.output
        assert not mock_runner.ran("distrobox", "rm")

    def test_ask_declined(self, invoke, mock_runner):
        result = invoke("install", "--on-existing", "ask", input="n\n")

        assert result.exit_code == 0, result.output
        assert "[WARNING] The sandbox 'ubuntu-signal' already exists" in result.output
        assert "Do you want to remove it and recreate it?" in result.output
        assert not mock_runner.ran("distrobox", "rm")
        assert not mock_runner.ran("distrobox", "create")

    def test_ask_confirmed(self, invoke, mock_runner):
        result = invoke("install", "--on-existing", "ask", input="y\n")

        assert result.exit_code == 0, result.output
        assert mock_runner.ran("distrobox", "rm", "-f", "ubuntu-signal")
        assert mock_runner.ran("distrobox", "create")

    def test_recreate_policy(self, invoke, mock_runner):
        result = invoke("install", "--on-existing", "recreate")

        assert result.exit_code == 0, result.output
        assert "Do you want to remove it" not in result.output
        assert mock_runner.ran("distrobox", "rm")


class TestDetectCommand:
    def test_text(self, invoke, ready_host):
        result = invoke("detect")

        assert result.exit_code == 0, result.output
        lines = [" ".join(line.split()) for line in result.output.splitlines()]
        assert "Package manager: apt" in lines
        assert any(line.startswith("Shell: bash") for line in lines)
        assert "distrobox: not installed" in lines

    def test_json(self, invoke, with_distrobox, mock_runner):
        mock_runner.set_output(("podman", "--version"), "podman version 4.9.3\n")
        mock_runner.set_output(("distrobox", "version"), "distrobox: 1.7.1\n")
        mock_runner.set_output(("distrobox", "list"), listing("ubuntu-signal"))

        result = invoke("detect", "--json")

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["host"]["package_manager"] == "apt"
        assert data["prerequisites"]["ok"] is True
        assert data["tool"]["available"] is True
        assert data["versions"]["podman"] == "4.9.3"
        assert data["versions"]["distrobox"] == "1.7.1"
        assert data["sandbox"]["exists"] is True

    def test_missing_prerequisites(self, invoke):
        result = invoke("detect")

        assert result.exit_code == 1
        assert "Neither curl nor wget found" in result.output


class TestConfigCommands:
    def test_check_valid(self, invoke, config_file):
        result = invoke("config", "check")

        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert str(config_file) in result.output

    def test_check_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(cli, ["config", "check", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["valid"] is True
        assert data["source"] == "(built-in defaults)"

    def test_check_invalid(self, tmp_path: Path):
        path = tmp_path / "broken.yml"
        path.write_text("timeouts: [1, 2]\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "config", "check", "--json"])

        assert result.exit_code == 1
        assert json.loads(result.stdout)["valid"] is False

    def test_check_missing_file(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["--config", str(tmp_path / "nope.yml"), "config", "check"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_show(self, invoke):
        result = invoke("config", "show")

        assert result.exit_code == 0
        assert "name: ubuntu-signal" in result.output
        assert "image: ubuntu:latest" in result.output


class TestSandboxCommands:
    def test_status_present(self, invoke, with_distrobox, mock_runner):
        mock_runner.set_output(("distrobox", "list"), listing("ubuntu-signal"))
        result = invoke("sandbox", "status")

        assert result.exit_code == 0
        assert "ubuntu-signal" in result.output
        assert "present" in result.output

    def test_status_json_absent(self, invoke, with_distrobox):
        result = invoke("sandbox", "status", "--json")

        assert result.exit_code == 0
        assert json.loads(result.stdout)["exists"] is False

    def test_status_without_tool(self, invoke):
        result = invoke("sandbox", "status")
        assert result.exit_code == 1
        assert "distrobox is not installed" in result.output

    def test_remove_confirmed(self, invoke, with_distrobox, mock_runner):
        mock_runner.set_output(("distrobox", "list"), listing("ubuntu-signal"))
        result = invoke("sandbox", "remove", input="y\n")

        assert result.exit_code == 0
        assert mock_runner.ran("distrobox", "rm", "-f", "ubuntu-signal")
        assert "removed" in result.output

    def test_remove_declined(self, invoke, with_distrobox, mock_runner):
        mock_runner.set_output(("distrobox", "list"), listing("ubuntu-signal"))
        result = invoke("sandbox", "remove", input="n\n")

        assert "Aborted." in result.output
        assert not mock_runner.ran("distrobox", "rm")

    def test_remove_absent(self, invoke, with_distrobox, mock_runner):
        result = invoke("sandbox", "remove", "--yes")

        assert result.exit_code == 0
        assert "does not exist" in result.output
        assert not mock_runner.ran("distrobox", "rm")

    def test_export(self, invoke, with_distrobox, mock_runner):
        result = invoke("sandbox", "export")

        assert result.exit_code == 0
        assert mock_runner.ran(
            "distrobox", "enter", "ubuntu-signal", "--", "distrobox-export", "--app", "signal-desktop"
        )
        assert "application menu" in result.output

    def test_export_failure(self, invoke, with_distrobox, mock_runner):
        mock_runner.set_failure(("distrobox", "enter"), error="container stopped")
        result = invoke("sandbox", "export")

        assert result.exit_code == 1
        assert "container stopped" in result.output
