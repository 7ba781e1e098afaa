"""Windows platform.

Besides the DLL, SwiftPM emits a PDB and an import library for every module;
both are copied next to the DLL but not referenced by the manifest. The Swift
runtime DLLs live in a versioned directory under the user's LocalAppData.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

from ..output import log_warning
from .base import PlatformDescriptor
from .desktop import build_swift

if TYPE_CHECKING:
    from ..build.orchestrator import BuildOrchestrator

_VERSION_PATTERN = re.compile(r"Swift version (\S+)")


def parse_swift_version(output: str) -> Optional[str]:
    """Return the toolchain version from the first line of ``swift -v`` output."""
    lines = output.splitlines()
    if not lines:
        return None
    match = _VERSION_PATTERN.search(lines[0])
    return match.group(1) if match else None


def find_swift_runtime(platform: PlatformDescriptor, builder: "BuildOrchestrator") -> Optional[str]:
    """Derive ``%LocalAppData%/Programs/Swift/Runtimes/<version>/usr/bin``."""
    version = parse_swift_version(builder.run("swift -v"))
    if version is None:
        log_warning("Unable to determine Swift version from 'swift -v'")
        return None
    runtime_dir = (
        builder.file_system.home_directory()
        / "AppData"
        / "Local"
        / "Programs"
        / "Swift"
        / "Runtimes"
        / version
        / "usr"
        / "bin"
    )
    if not builder.file_system.file_exists(runtime_dir):
        log_warning(f"Swift runtime directory not found: {runtime_dir}")
        return None
    return str(runtime_dir)


WINDOWS = PlatformDescriptor(
    name="windows",
    library_extension="dll",
    sidecar_extensions=("pdb", "lib"),
    debug_info_format="codeview",
    build=build_swift,
    find_runtime_directory=find_swift_runtime,
)
