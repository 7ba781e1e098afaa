"""GDExtension manifest model.

An ExtensionManifest is built once from the session's matrix (platforms,
architectures, modes) and the runtime libraries the orchestrator recorded,
and renders itself to a SectionDocument with three sections:

    [configuration]   entry symbol and compatibility range
    [libraries]       target label -> driver library path
    [dependencies]    target label -> {dependency path: ""}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

from ..build.build_modes import Architecture, BuildMode
from ..build.matrix import expand_matrix
from ..config import DEFAULT_BINDING_LIBRARY
from ..platforms.base import PlatformDescriptor, directory_for, main_library_names
from .sections import SectionDocument

ENTRY_SYMBOL = "swift_entry_point"
COMPATIBILITY_MINIMUM = 4.2


@dataclass(frozen=True)
class ExtensionConfiguration:
    """Global ``[configuration]`` section. Unset optional fields are omitted."""

    entry_symbol: str = ENTRY_SYMBOL
    compatibility_minimum: float = COMPATIBILITY_MINIMUM
    compatibility_maximum: Optional[float] = None
    reloadable: Optional[bool] = None
    android_aar_plugin: Optional[bool] = None

    @classmethod
    def standard(cls) -> "ExtensionConfiguration":
        return cls()

    def to_values(self) -> Dict[str, Any]:
        values = (
            ("entry_symbol", self.entry_symbol),
            ("compatibility_minimum", self.compatibility_minimum),
            ("compatibility_maximum", self.compatibility_maximum),
            ("reloadable", self.reloadable),
            ("android_aar_plugin", self.android_aar_plugin),
        )
        return {key: value for key, value in values if value is not None}


class ManifestEntry(NamedTuple):
    """Library and dependency entries for one matrix cell."""

    label: str
    library: str
    dependencies: Dict[str, str]


@dataclass(frozen=True)
class ExtensionManifest:
    """
    Manifest for one driver.

    Attributes:
        name: Driver name (library stem)
        platforms: Platforms that were built
        archs: Requested architectures
        modes: Requested build modes
        dependencies: Runtime library file names keyed by directory label
        configuration: Global configuration section
        binding_library: Stem of the binding library shipped next to the driver
        bin_location: Prefix for every path, e.g. ``res://bin/``
    """

    name: str
    platforms: Tuple[PlatformDescriptor, ...]
    archs: Tuple[Architecture, ...]
    modes: Tuple[BuildMode, ...]
    dependencies: Mapping[str, List[str]] = field(default_factory=dict)
    configuration: ExtensionConfiguration = field(default_factory=ExtensionConfiguration.standard)
    binding_library: str = DEFAULT_BINDING_LIBRARY
    bin_location: str = ""

    @staticmethod
    def label_for(platform: PlatformDescriptor, mode: BuildMode, arch: Optional[Architecture]) -> str:
        """Target label, e.g. ``linux.debug.arm64`` or ``ios.release``."""
        if arch is None:
            return f"{platform.name}.{mode}"
        return f"{platform.name}.{mode}.{arch.alias}"

    def location_for(self, platform: PlatformDescriptor, mode: BuildMode, arch: Optional[Architecture]) -> str:
        prefix = self.bin_location
        if prefix and not prefix.endswith("/"):
            prefix += "/"
        return f"{prefix}{directory_for(platform, arch)}/{mode}"

    def entry(self, platform: PlatformDescriptor, mode: BuildMode, arch: Optional[Architecture]) -> ManifestEntry:
        """Compute the manifest entries of a single cell.

        Raises:
            LibraryMappingError: If the platform cannot name the libraries
        """
        location = self.location_for(platform, mode, arch)
        libraries = main_library_names(platform, self.name, self.binding_library)

        dependencies = {f"{location}/{libraries.binding}": ""}
        for file_name in self.dependencies.get(directory_for(platform, arch), ()):
            dependencies[f"{location}/{file_name}"] = ""

        return ManifestEntry(
            label=self.label_for(platform, mode, arch),
            library=f"{location}/{libraries.driver}",
            dependencies=dependencies,
        )

    def entries(self) -> List[ManifestEntry]:
        return [
            self.entry(cell.platform, cell.mode, cell.arch)
            for cell in expand_matrix(self.modes, self.platforms, self.archs)
        ]

    def sections(self) -> SectionDocument:
        """Render to the ``configuration``/``libraries``/``dependencies`` document."""
        entries = self.entries()
        document = SectionDocument()
        document.add("configuration", self.configuration.to_values())
        document.add("libraries", {entry.label: entry.library for entry in entries})
        document.add("dependencies", {entry.label: entry.dependencies for entry in entries})
        return document
