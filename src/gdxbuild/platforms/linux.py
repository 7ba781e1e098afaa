"""Linux platform.

Linux drivers link against the Swift runtime (libFoundation.so and friends)
installed with the toolchain. After a build, ``ldd`` is run on the copied
binding library and the directory holding libFoundation.so is reported so the
orchestrator can bundle every shared object from it.
"""

from __future__ import annotations

import logging
import posixpath
from typing import TYPE_CHECKING, Optional

from ..output import log_warning
from ..subprocess_utils import quote_argument
from .base import PlatformDescriptor, main_library_names
from .desktop import build_swift

if TYPE_CHECKING:
    from ..build.orchestrator import BuildOrchestrator

logger = logging.getLogger(__name__)

RUNTIME_MARKER = "libFoundation.so"


def parse_ldd_output(output: str, marker: str = RUNTIME_MARKER) -> Optional[str]:
    """Extract the directory of ``marker`` from ldd output.

    ldd lines look like::

        libFoundation.so => /usr/lib/swift/linux/libFoundation.so (0x00007f...)

    Returns:
        Absolute directory containing the marker library, or None if no line
        mentions the marker or the line carries no resolved path
    """
    for line in output.splitlines():
        if marker not in line:
            continue
        _, arrow, resolved = line.partition("=>")
        if not arrow:
            logger.debug(f"ldd line without '=>': {line.strip()}")
            return None
        tokens = resolved.split()
        if not tokens or not tokens[0].startswith("/"):
            logger.debug(f"ldd could not resolve {marker}: {line.strip()}")
            return None
        return posixpath.dirname(tokens[0])
    return None


def find_swift_runtime(platform: PlatformDescriptor, builder: "BuildOrchestrator") -> Optional[str]:
    """Locate the Swift runtime directory the copied binding library links against."""
    binding = main_library_names(platform, builder.driver_name, builder.binding_library).binding
    binding_path = builder.destination_directory(platform, builder.arch) / binding

    runtime_dir = parse_ldd_output(builder.run(f"ldd {quote_argument(str(binding_path))}"))
    if runtime_dir is None:
        log_warning(f"Unable to find {RUNTIME_MARKER} in ldd output")
    return runtime_dir


LINUX = PlatformDescriptor(
    name="linux",
    library_extension="so",
    build=build_swift,
    find_runtime_directory=find_swift_runtime,
)
