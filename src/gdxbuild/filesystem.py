"""File-system capability used by the build pipeline.

The orchestrator and platform procedures never touch the disk directly; they
go through a FileSystem instance. LocalFileSystem is the real implementation,
tests substitute an in-memory tree.
"""

import shutil
from abc import ABC, abstractmethod
from pathlib import Path


class FileSystem(ABC):
    """Interface for the file operations the build pipeline needs."""

    @abstractmethod
    def file_exists(self, path: Path) -> bool:
        """Return True if a file or directory exists at path."""

    @abstractmethod
    def create_directory(self, path: Path, recursive: bool = True) -> None:
        """Create a directory (and its parents when recursive)."""

    @abstractmethod
    def copy_file(self, source: Path, destination: Path) -> None:
        """Copy source to destination. Directories are copied recursively."""

    @abstractmethod
    def remove_file(self, path: Path) -> None:
        """Remove a file, or a whole directory tree."""

    @abstractmethod
    def list_directory(self, path: Path) -> list[str]:
        """Return the names of the entries in a directory."""

    @abstractmethod
    def read_text_file(self, path: Path, encoding: str = "utf-8") -> str:
        """Read a text file."""

    @abstractmethod
    def write_text_file(self, path: Path, text: str, encoding: str = "utf-8") -> None:
        """Write a text file, replacing any existing content."""

    @abstractmethod
    def home_directory(self) -> Path:
        """Return the current user's home directory."""

    @abstractmethod
    def current_directory(self) -> Path:
        """Return the process working directory."""


class LocalFileSystem(FileSystem):
    """FileSystem backed by pathlib and shutil."""

    def file_exists(self, path: Path) -> bool:
        return Path(path).exists()

    def create_directory(self, path: Path, recursive: bool = True) -> None:
        Path(path).mkdir(parents=recursive, exist_ok=True)

    def copy_file(self, source: Path, destination: Path) -> None:
        source = Path(source)
        # .framework bundles are directories
        if source.is_dir():
            shutil.copytree(source, destination, symlinks=True)
        else:
            shutil.copy2(source, destination)

    def remove_file(self, path: Path) -> None:
        path = Path(path)
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()

    def list_directory(self, path: Path) -> list[str]:
        return sorted(entry.name for entry in Path(path).iterdir())

    def read_text_file(self, path: Path, encoding: str = "utf-8") -> str:
        return Path(path).read_text(encoding=encoding)

    def write_text_file(self, path: Path, text: str, encoding: str = "utf-8") -> None:
        Path(path).write_text(text, encoding=encoding)

    def home_directory(self) -> Path:
        return Path.home()

    def current_directory(self) -> Path:
        return Path.cwd()
