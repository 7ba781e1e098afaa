"""Swift Package Manager build procedure shared by desktop platforms."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..subprocess_utils import quote_argument
from .base import PlatformDescriptor

if TYPE_CHECKING:
    from ..build.orchestrator import BuildOrchestrator


def swift_build_command(platform: PlatformDescriptor, builder: "BuildOrchestrator") -> str:
    """Compose ``cd <driver> && swift build --arch <arch> --configuration <mode>``."""
    if builder.arch is None:
        raise ValueError(f"Platform '{platform.id}' requires an architecture to build")
    parts = [
        f"cd {quote_argument(str(builder.driver_path))}",
        "&&",
        f"swift build --arch {builder.arch}",
        f"--configuration {builder.mode}",
    ]
    if platform.debug_info_format:
        parts.append(f"-debug-info-format {platform.debug_info_format}")
    return " ".join(parts)


def build_swift(platform: PlatformDescriptor, builder: "BuildOrchestrator") -> str:
    """Build the driver package and return SwiftPM's bin directory.

    Runs the build once, then asks SwiftPM for its output directory with the
    same arguments plus ``--show-bin-path``.
    """
    command = swift_build_command(platform, builder)
    builder.run(command)
    return builder.run(f"{command} --show-bin-path").strip("\r\n")
