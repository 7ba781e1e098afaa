"""Tests for the 'gdxbuild build' command."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from gdxbuild.build.build_modes import Architecture
from gdxbuild.cli import main
from gdxbuild.errors import ExecutionFailed, ShellNotFoundError
from gdxbuild.manifest.decoder import SectionDecoder
from gdxbuild.platforms import Target

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="POSIX paths and shell")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    monkeypatch.delenv("GDXBUILD_BIN_FOLDER", raising=False)
    monkeypatch.delenv("GDXBUILD_SHELL", raising=False)
    with patch("gdxbuild.cli.setup_logging"):
        yield


@pytest.fixture
def project_dir(tmp_path):
    """Project with a fake SwiftPM output directory."""
    swift_bin = tmp_path / "GameDriver" / ".build" / "debug"
    swift_bin.mkdir(parents=True)
    (swift_bin / "GameDriver.so").write_text("driver")
    (swift_bin / "SwiftGodot.so").write_text("binding")
    return tmp_path


def _run(monkeypatch, argv):
    monkeypatch.setattr(sys, "argv", ["gdxbuild", *argv])
    with pytest.raises(SystemExit) as exc_info:
        main()
    return exc_info.value.code


class TestCLIBuild:
    def test_build_success(self, project_dir, runner, monkeypatch):
        runner.on("--show-bin-path", f"{project_dir / 'GameDriver' / '.build' / 'debug'}\n")
        runner.on("ldd", "\tlibc.so.6 => /lib/libc.so.6 (0x0001)\n")

        with (
            patch.object(Target, "current", return_value=Target.LINUX),
            patch("gdxbuild.cli.locate_shell", return_value=Path("/bin/sh")),
            patch("gdxbuild.cli.CommandRunner", return_value=runner),
        ):
            code = _run(
                monkeypatch,
                ["build", "--project-dir", str(project_dir), "-d", "GameDriver", "-t", "linux", "-a", "aarch64"],
            )

        assert code == 0
        library = project_dir / "bin" / "GameDriver" / "linux-aarch64" / "debug" / "GameDriver.so"
        assert library.read_text() == "driver"

        manifest = (project_dir / "bin" / "GameDriver.gdextension").read_text()
        document = SectionDecoder().decode(manifest)
        assert document["libraries"] == {"linux.debug.arm64": "linux-aarch64/debug/GameDriver.so"}

    def test_defaults_to_host_target_and_arch(self, project_dir, runner, monkeypatch):
        runner.on("--show-bin-path", f"{project_dir / 'GameDriver' / '.build' / 'debug'}\n")

        with (
            patch.object(Target, "current", return_value=Target.LINUX),
            patch.object(Architecture, "current", return_value=Architecture.X86_64),
            patch("gdxbuild.cli.locate_shell", return_value=Path("/bin/sh")),
            patch("gdxbuild.cli.CommandRunner", return_value=runner),
        ):
            code = _run(monkeypatch, ["build", "--project-dir", str(project_dir), "-p", "Game"])

        assert code == 0
        assert "--arch x86_64 --configuration debug" in runner.commands[0]
        assert (project_dir / "bin" / "GameDriver" / "linux-x86_64" / "debug" / "GameDriver.so").exists()

    def test_execution_failure_exits_1(self, project_dir, runner, monkeypatch, console):
        runner.on("swift build", ExecutionFailed(1, "swift build"))

        with (
            patch.object(Target, "current", return_value=Target.LINUX),
            patch("gdxbuild.cli.locate_shell", return_value=Path("/bin/sh")),
            patch("gdxbuild.cli.CommandRunner", return_value=runner),
        ):
            code = _run(monkeypatch, ["build", "--project-dir", str(project_dir), "-d", "GameDriver", "-a", "aarch64"])

        assert code == 1
        assert "ERROR: execution: Command failed with exit code 1" in console.getvalue()
        assert not (project_dir / "bin" / "GameDriver.gdextension").exists()

    def test_missing_shell_exits_1(self, project_dir, monkeypatch, console):
        with (
            patch.object(Target, "current", return_value=Target.LINUX),
            patch("gdxbuild.cli.locate_shell", side_effect=ShellNotFoundError("Unable to locate a command shell")),
        ):
            code = _run(monkeypatch, ["build", "--project-dir", str(project_dir), "-a", "aarch64"])

        assert code == 1
        assert "ERROR: environment: Unable to locate a command shell" in console.getvalue()

    def test_invalid_target_selection_exits_1(self, project_dir, monkeypatch, console):
        with patch.object(Target, "current", return_value=Target.LINUX):
            code = _run(monkeypatch, ["build", "--project-dir", str(project_dir), "-t", "ios"])

        assert code == 1
        assert "ERROR: environment: ios builds require a macOS host" in console.getvalue()

    def test_keyboard_interrupt_exits_130(self, project_dir, runner, monkeypatch):
        runner.on("swift build", KeyboardInterrupt())

        with (
            patch.object(Target, "current", return_value=Target.LINUX),
            patch("gdxbuild.cli.locate_shell", return_value=Path("/bin/sh")),
            patch("gdxbuild.cli.CommandRunner", return_value=runner),
        ):
            code = _run(monkeypatch, ["build", "--project-dir", str(project_dir), "-a", "aarch64"])

        assert code == 130

    @pytest.mark.parametrize("verbose", [False, True])
    def test_unexpected_error_exits_1(self, project_dir, runner, monkeypatch, console, verbose):
        runner.on("swift build", ValueError("bad toolchain state"))
        argv = ["build", "--project-dir", str(project_dir), "-a", "aarch64"] + (["-v"] if verbose else [])

        with (
            patch.object(Target, "current", return_value=Target.LINUX),
            patch("gdxbuild.cli.locate_shell", return_value=Path("/bin/sh")),
            patch("gdxbuild.cli.CommandRunner", return_value=runner),
        ):
            code = _run(monkeypatch, argv)

        assert code == 1
        text = console.getvalue()
        assert "ERROR: Unexpected error: ValueError: bad toolchain state" in text
        assert ("Traceback (most recent call last)" in text) is verbose

    def test_unknown_target_rejected_by_parser(self, project_dir, monkeypatch):
        assert _run(monkeypatch, ["build", "--project-dir", str(project_dir), "-t", "android"]) == 2

    def test_missing_project_dir_exits_2(self, tmp_path, monkeypatch):
        assert _run(monkeypatch, ["build", "--project-dir", str(tmp_path / "missing")]) == 2

    def test_no_command_prints_help(self, monkeypatch, capsys):
        assert _run(monkeypatch, []) == 0
        assert "usage: gdxbuild" in capsys.readouterr().out
