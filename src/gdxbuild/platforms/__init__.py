"""Platform descriptors and build-target selection.

Targets are what users pick on the command line; each maps to exactly one
PlatformDescriptor.
"""

import sys
from enum import Enum
from typing import Iterable, List, Optional

from ..errors import TargetValidationError, UnsupportedHostError
from .base import (
    LibraryPair,
    PlatformDescriptor,
    directory_for,
    files_to_copy,
    library_names,
    main_library_names,
    sidecar_library_names,
)
from .ios import IOS, IOS_SIMULATOR
from .linux import LINUX
from .macos import MACOS
from .windows import WINDOWS


class Target(Enum):
    """User-selectable build target."""

    MACOS = "macos"
    IOS = "ios"
    IOS_SIMULATOR = "iossimulator"
    LINUX = "linux"
    WINDOWS = "windows"

    def __str__(self) -> str:
        return self.value

    @property
    def platform(self) -> PlatformDescriptor:
        return _PLATFORMS[self]

    @classmethod
    def current(cls, host: Optional[str] = None) -> "Target":
        """Target matching the host OS.

        Args:
            host: sys.platform-style identifier (defaults to sys.platform)

        Raises:
            UnsupportedHostError: If the host OS cannot build any target
        """
        host = host if host is not None else sys.platform
        if host == "darwin":
            return cls.MACOS
        if host.startswith("linux"):
            return cls.LINUX
        if host == "win32":
            return cls.WINDOWS
        raise UnsupportedHostError(f"Unsupported host platform: {host}")


_PLATFORMS = {
    Target.MACOS: MACOS,
    Target.IOS: IOS,
    Target.IOS_SIMULATOR: IOS_SIMULATOR,
    Target.LINUX: LINUX,
    Target.WINDOWS: WINDOWS,
}

_APPLE_MOBILE = (Target.IOS, Target.IOS_SIMULATOR)


def validate_targets(targets: Iterable[Target], host: Target) -> List[Target]:
    """Check that the requested targets can be built on ``host``.

    Rules:
    - iOS and iOS Simulator can only be built on macOS (through Xcode)
    - every other target must match the host (no cross compiling)
    - iOS and iOS Simulator share one manifest entry, so only one of them
      can be built at a time

    Args:
        targets: Requested targets; empty means "host only"
        host: Target of the current host

    Returns:
        The validated target list (host target when none were requested)

    Raises:
        TargetValidationError: If any rule is violated
    """
    selected = list(targets) or [host]
    for target in selected:
        if target in _APPLE_MOBILE:
            if host is not Target.MACOS:
                raise TargetValidationError(f"{target} builds require a macOS host")
        elif target is not host:
            raise TargetValidationError(f"Cross compiling from {host} to {target} is not supported")

    if all(target in selected for target in _APPLE_MOBILE):
        raise TargetValidationError("Cannot build for both iOS device and iOS Simulator at once")
    return selected


__all__ = [
    "IOS",
    "IOS_SIMULATOR",
    "LINUX",
    "MACOS",
    "WINDOWS",
    "LibraryPair",
    "PlatformDescriptor",
    "Target",
    "directory_for",
    "files_to_copy",
    "library_names",
    "main_library_names",
    "sidecar_library_names",
    "validate_targets",
]
