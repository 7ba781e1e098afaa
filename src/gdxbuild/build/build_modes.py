"""Build matrix axes: build modes and CPU architectures.

Both enums render as their value via str(), which is what the Swift toolchain
expects on the command line (``--configuration debug``, ``--arch aarch64``)
and what the output layout uses for directory names.
"""

import platform
from enum import Enum
from typing import Optional

from ..errors import UnsupportedHostError


class BuildMode(Enum):
    """Swift build configuration."""

    DEBUG = "debug"
    RELEASE = "release"

    def __str__(self) -> str:
        """Return the string value for directory names and commands."""
        return self.value

    @property
    def capitalized(self) -> str:
        """Xcode-style configuration name (Debug / Release)."""
        return self.value.capitalize()


class Architecture(Enum):
    """CPU architecture a desktop library is built for."""

    X86_64 = "x86_64"
    AARCH64 = "aarch64"

    def __str__(self) -> str:
        return self.value

    @property
    def alias(self) -> str:
        """Architecture name as the engine spells it in manifest labels."""
        if self is Architecture.AARCH64:
            return "arm64"
        return self.value

    @classmethod
    def current(cls, machine: Optional[str] = None) -> "Architecture":
        """Detect the host architecture.

        Args:
            machine: Machine string to map (defaults to platform.machine())

        Raises:
            UnsupportedHostError: If the machine is neither x86_64 nor arm64
        """
        name = (machine if machine is not None else platform.machine()).lower()
        if name in ("arm64", "aarch64"):
            return cls.AARCH64
        if name in ("x86_64", "amd64"):
            return cls.X86_64
        raise UnsupportedHostError(f"Unsupported host architecture: {name or 'unknown'}")
