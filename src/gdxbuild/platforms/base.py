"""Platform descriptors and the naming rules shared by every platform.

A PlatformDescriptor is an immutable value describing one target family: how
its libraries are named, which architectures it supports, whether each
architecture gets its own output directory, and the procedures that build the
driver and locate the runtime libraries it links against.

Shared behaviour lives in free functions operating on a descriptor rather
than in per-platform overrides:

    library_names(platform, driver, binding)   ordered (driver, binding) pairs
    files_to_copy(platform, driver, binding)   flattened copy list
    directory_for(platform, arch)              ``id`` or ``id-arch``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, NamedTuple, Optional

from ..build.build_modes import Architecture
from ..errors import LibraryMappingError

if TYPE_CHECKING:
    from ..build.orchestrator import BuildOrchestrator

BuildProcedure = Callable[["PlatformDescriptor", "BuildOrchestrator"], str]
RuntimeDiscovery = Callable[["PlatformDescriptor", "BuildOrchestrator"], Optional[str]]

ALL_ARCHITECTURES: tuple[Architecture, ...] = (Architecture.AARCH64, Architecture.X86_64)


class LibraryPair(NamedTuple):
    """File names of the driver library and the binding library for one extension."""

    driver: str
    binding: str


def no_runtime_directory(platform: "PlatformDescriptor", builder: "BuildOrchestrator") -> Optional[str]:
    """Default discovery procedure: the platform bundles no runtime libraries."""
    return None


@dataclass(frozen=True)
class PlatformDescriptor:
    """One target family.

    Attributes:
        name: Platform name used in manifest labels (e.g. "linux", "ios")
        id: Canonical id used in directory names (defaults to name)
        library_extension: Extension of the loadable library ("so", "dll", ...)
        sidecar_extensions: Companion files copied but not loaded (pdb, lib)
        library_prefix: Prefix prepended to library file names
        separate_archs: Whether every architecture is built into its own directory
        supported_archs: Architectures the platform can be built for
        build: Procedure building the driver, returns the toolchain output directory
        find_runtime_directory: Procedure locating runtime libraries to bundle
        debug_info_format: Optional ``-debug-info-format`` value for swift build
        destination: xcodebuild destination name (archive-based platforms)
    """

    name: str
    library_extension: str
    build: BuildProcedure
    id: str = ""
    sidecar_extensions: tuple[str, ...] = ()
    library_prefix: str = ""
    separate_archs: bool = True
    supported_archs: tuple[Architecture, ...] = ALL_ARCHITECTURES
    find_runtime_directory: RuntimeDiscovery = no_runtime_directory
    debug_info_format: Optional[str] = None
    destination: Optional[str] = field(default=None)

    def __post_init__(self) -> None:
        if not self.id:
            object.__setattr__(self, "id", self.name)

    def supports(self, arch: Architecture) -> bool:
        return arch in self.supported_archs


def library_file_name(platform: PlatformDescriptor, stem: str, extension: str) -> str:
    """Compose ``prefix + stem + "." + extension``.

    Raises:
        LibraryMappingError: If the stem or extension is empty
    """
    if not stem or not extension:
        raise LibraryMappingError(
            f"Cannot map library name for platform '{platform.id}' (stem={stem!r}, extension={extension!r})"
        )
    return f"{platform.library_prefix}{stem}.{extension}"


def library_names(platform: PlatformDescriptor, driver: str, binding: str) -> list[LibraryPair]:
    """Ordered library pairs: primary extension first, then one pair per sidecar."""
    pairs = []
    for extension in (platform.library_extension, *platform.sidecar_extensions):
        pairs.append(
            LibraryPair(
                driver=library_file_name(platform, driver, extension),
                binding=library_file_name(platform, binding, extension),
            )
        )
    return pairs


def main_library_names(platform: PlatformDescriptor, driver: str, binding: str) -> LibraryPair:
    """Driver and binding library names referenced by the manifest."""
    return library_names(platform, driver, binding)[0]


def sidecar_library_names(platform: PlatformDescriptor, driver: str, binding: str) -> list[LibraryPair]:
    """Companion files (debug symbols, import libraries) that are only copied."""
    return library_names(platform, driver, binding)[1:]


def files_to_copy(platform: PlatformDescriptor, driver: str, binding: str) -> list[str]:
    """Every file a build cycle copies out of the toolchain output directory."""
    names: list[str] = []
    for pair in library_names(platform, driver, binding):
        names.extend(pair)
    return names


def directory_for(platform: PlatformDescriptor, arch: Optional[Architecture]) -> str:
    """Output directory label for a platform/architecture combination."""
    if arch is None or not platform.separate_archs:
        return platform.id
    return f"{platform.id}-{arch.value}"
