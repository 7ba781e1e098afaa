"""Tests for the timestamped console output module."""

import io
import re

import pytest

from gdxbuild import output

TIMESTAMP = r"\d{2}:\d{2}\.\d{2}"


def test_log_prefixes_timestamp(console):
    output.log("Creating .gdextension file")
    assert re.fullmatch(rf"{TIMESTAMP} Creating \.gdextension file\n", console.getvalue())


def test_log_phase_format(console):
    output.log_phase(2, 4, "Building for: linux-debug-aarch64")
    assert "[2/4] Building for: linux-debug-aarch64" in console.getvalue()


def test_log_detail_indents(console):
    output.log_detail("Copying extension library: GameDriver.so")
    assert " " * 6 + "Copying extension library: GameDriver.so" in console.getvalue()


def test_verbose_only_messages_hidden_when_quiet(console):
    output.set_verbose(False)
    output.log("hidden", verbose_only=True)
    output.log("shown")
    assert "hidden" not in console.getvalue()
    assert "shown" in console.getvalue()


def test_echo_adds_missing_newline(console):
    output.echo("Compiling GameDriver")
    output.echo("Linking\n")
    assert console.getvalue() == "Compiling GameDriver\nLinking\n"


def test_echo_silent_when_not_verbose(console):
    output.set_verbose(False)
    output.echo("Compiling GameDriver")
    assert console.getvalue() == ""


def test_error_and_warning_prefixes(console):
    output.log_error("execution: Command failed with exit code 1")
    output.log_warning("Unable to find libFoundation.so in ldd output")
    text = console.getvalue()
    assert "ERROR: execution: Command failed with exit code 1" in text
    assert "WARNING: Unable to find libFoundation.so in ldd output" in text


def test_output_file_receives_copy(console):
    log_file = io.StringIO()
    output.set_output_file(log_file)
    try:
        output.log("mirrored")
    finally:
        output.set_output_file(None)
    assert "mirrored" in log_file.getvalue()
    assert "mirrored" in console.getvalue()


class TestTimedLogger:
    def test_logs_done_on_success(self, console):
        with output.TimedLogger("Building for: macos-debug-x86_64", phase=(1, 2)):
            pass
        text = console.getvalue()
        assert "[1/2] Building for: macos-debug-x86_64" in text
        assert re.search(r"Done \(\d+\.\d{2}s\)", text)

    def test_no_done_on_failure(self, console):
        with pytest.raises(RuntimeError):
            with output.TimedLogger("Building for: linux-release-x86_64"):
                raise RuntimeError("boom")
        text = console.getvalue()
        assert "Building for: linux-release-x86_64" in text
        assert "Done" not in text
