"""Pytest configuration and fixtures for gdxbuild tests.

This conftest addresses Python 3.13 compatibility issues with pytest's capture fixtures.
Python 3.13 changed how stdout/stderr are handled, causing "I/O operation on closed file"
errors during test teardown. This is a known issue: https://github.com/pytest-dev/pytest/issues/11439

It also provides the doubles used by the build-pipeline tests: an in-memory
FileSystem and a command runner that answers commands from a script.
"""

import io
import sys
import warnings
from pathlib import Path

import pytest

from gdxbuild import output
from gdxbuild.build.build_context import BuildParams
from gdxbuild.build.orchestrator import BuildOrchestrator
from gdxbuild.config import BuilderSettings
from gdxbuild.filesystem import FileSystem

# Suppress ResourceWarnings from file cleanup in Python 3.13
if sys.version_info >= (3, 13):
    warnings.filterwarnings("ignore", category=ResourceWarning)


@pytest.fixture(autouse=True)
def _restore_stdio():  # noqa: PT004
    """Ensure stdout/stderr are always restored after each test.

    This prevents "I/O operation on closed file" errors in Python 3.13
    when tests raise exceptions that close stdout/stderr.
    """
    yield

    # Restore if they were closed during the test
    if sys.stdout.closed:
        sys.stdout = sys.__stdout__
    if sys.stderr.closed:
        sys.stderr = sys.__stderr__


@pytest.hookimpl(hookwrapper=True, tryfirst=True)
def pytest_runtest_call(item):  # noqa: ARG001
    """Wrap test execution to handle stdout/stderr closure gracefully."""
    yield

    # After test execution, ensure streams aren't closed
    if hasattr(sys.stdout, "closed") and sys.stdout.closed:
        sys.stdout = sys.__stdout__
    if hasattr(sys.stderr, "closed") and sys.stderr.closed:
        sys.stderr = sys.__stderr__


@pytest.fixture(autouse=True)
def console():
    """Route gdxbuild.output into a StringIO for the duration of a test."""
    stream = io.StringIO()
    output.init_timer(stream)
    output.set_verbose(True)
    output.set_output_file(None)
    yield stream
    output.init_timer(sys.stdout)
    output.set_verbose(True)


class MemoryFileSystem(FileSystem):
    """In-memory FileSystem: files map to text content, directories are a set."""

    def __init__(self, home: Path = Path("/home/dev"), cwd: Path = Path("/work")):
        self.files: dict = {}
        self.directories: set = set()
        self.home = home
        self.cwd = cwd

    # Test helpers

    def add_file(self, path, content: str = "") -> None:
        path = Path(path)
        self.create_directory(path.parent)
        self.files[path] = content

    def _children(self, path: Path) -> list:
        entries = [p for p in self.files if p.parent == path]
        entries.extend(p for p in self.directories if p.parent == path and p != path)
        return entries

    # FileSystem

    def file_exists(self, path) -> bool:
        path = Path(path)
        return path in self.files or path in self.directories

    def create_directory(self, path, recursive: bool = True) -> None:
        path = Path(path)
        if not recursive and path.parent not in self.directories and path.parent != path:
            raise FileNotFoundError(str(path.parent))
        self.directories.add(path)
        if recursive:
            self.directories.update(path.parents)

    def copy_file(self, source, destination) -> None:
        source, destination = Path(source), Path(destination)
        if source in self.files:
            self.files[destination] = self.files[source]
            return
        if source not in self.directories:
            raise FileNotFoundError(str(source))
        self.directories.add(destination)
        for child in self._children(source):
            self.copy_file(child, destination / child.name)

    def remove_file(self, path) -> None:
        path = Path(path)
        if path in self.files:
            del self.files[path]
            return
        if path not in self.directories:
            raise FileNotFoundError(str(path))
        for child in self._children(path):
            self.remove_file(child)
        self.directories.discard(path)

    def list_directory(self, path) -> list:
        path = Path(path)
        if path not in self.directories:
            raise FileNotFoundError(str(path))
        return sorted(child.name for child in self._children(path))

    def read_text_file(self, path, encoding: str = "utf-8") -> str:
        return self.files[Path(path)]

    def write_text_file(self, path, text: str, encoding: str = "utf-8") -> None:
        self.files[Path(path)] = text

    def home_directory(self) -> Path:
        return self.home

    def current_directory(self) -> Path:
        return self.cwd


class ScriptedRunner:
    """Command runner double.

    Responses are matched by substring in registration order. A response can
    be a string, an exception instance (raised) or a callable taking the
    command and returning the output. Unmatched commands return "".
    """

    def __init__(self):
        self.responses: list = []
        self.commands: list = []
        self.drain_count = 0

    def on(self, needle: str, result) -> "ScriptedRunner":
        self.responses.append((needle, result))
        return self

    def drain(self) -> str:
        self.drain_count += 1
        return ""

    def run(self, command: str) -> str:
        self.commands.append(command)
        for needle, result in self.responses:
            if needle not in command:
                continue
            if isinstance(result, BaseException):
                raise result
            if callable(result):
                return result(command)
            return result
        return ""


@pytest.fixture
def memory_fs():
    return MemoryFileSystem()


@pytest.fixture
def runner():
    return ScriptedRunner()


@pytest.fixture
def params():
    """Project /work/Game with driver GameDriver and default settings."""
    return BuildParams.create(
        working_directory=Path("/work/Game"),
        settings=BuilderSettings(),
        driver_name="GameDriver",
    )


@pytest.fixture
def orchestrator(params, runner, memory_fs):
    return BuildOrchestrator(params, runner, memory_fs)
