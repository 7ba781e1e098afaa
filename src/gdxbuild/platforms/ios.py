"""iOS device and simulator platforms.

Both are archived through xcodebuild, which builds every architecture the
destination needs into one framework, so architectures are never separated.
The engine has a single "ios" entry for both; only the output directory id
differs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..subprocess_utils import quote_argument
from .base import PlatformDescriptor

if TYPE_CHECKING:
    from ..build.orchestrator import BuildOrchestrator

ARCHIVE_NAME = "xcodebuild"
ARCHIVE_LIBRARY_SUBPATH = "Products/usr/local/lib/"


def xcodebuild_archive_command(platform: PlatformDescriptor, builder: "BuildOrchestrator") -> str:
    """Compose the ``xcodebuild archive`` invocation for the current mode."""
    return " ".join(
        [
            f"cd {quote_argument(str(builder.driver_path))}",
            "&&",
            "xcodebuild archive",
            f"-scheme {builder.driver_name}",
            f"-configuration {builder.mode.capitalized}",
            f"-archivePath ./{ARCHIVE_NAME}",
            f"-destination 'generic/platform={platform.destination}'",
        ]
    )


def build_archive(platform: PlatformDescriptor, builder: "BuildOrchestrator") -> str:
    """Archive the driver and return the library folder inside the archive."""
    archive_path = builder.driver_path / f"{ARCHIVE_NAME}.xcarchive"
    if builder.file_system.file_exists(archive_path):
        builder.file_system.remove_file(archive_path)

    builder.run(xcodebuild_archive_command(platform, builder))
    return f"{archive_path}/{ARCHIVE_LIBRARY_SUBPATH}"


IOS = PlatformDescriptor(
    name="ios",
    library_extension="framework",
    separate_archs=False,
    destination="iOS",
    build=build_archive,
)

IOS_SIMULATOR = PlatformDescriptor(
    name="ios",
    id="iossimulator",
    library_extension="framework",
    separate_archs=False,
    destination="iOS Simulator",
    build=build_archive,
)
