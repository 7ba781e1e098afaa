"""macOS platform: per-architecture dylibs built with SwiftPM."""

from .base import PlatformDescriptor
from .desktop import build_swift

MACOS = PlatformDescriptor(
    name="macos",
    library_extension="dylib",
    library_prefix="lib",
    build=build_swift,
)
