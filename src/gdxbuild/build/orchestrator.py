"""
Build orchestration for GDExtension drivers.

The orchestrator walks the build matrix one cell at a time. For every cell it:

1. Resets the session state to the cell's mode/architecture and discards any
   stale command output
2. Runs the platform's build procedure through the command runner
3. Copies the driver library, the binding library and any sidecar files into
   ``<bin>/<driver>/<platform dir>/<mode>``
4. Asks the platform for its runtime-library directory and bundles every
   library found there next to the driver

Cells run strictly sequentially because they share one working tree and one
command runner. The first failure aborts the whole run.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..command_runner import CommandRunner
from ..filesystem import FileSystem
from ..manifest.encoder import SectionEncoder
from ..manifest.extension import ExtensionConfiguration, ExtensionManifest
from ..output import TimedLogger, log, log_detail
from ..platforms.base import PlatformDescriptor, directory_for, files_to_copy
from .build_context import BuilderState, BuildParams, BuildTarget
from .build_modes import Architecture, BuildMode
from .matrix import expand_matrix

# Module-level logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuiltCell:
    """Outcome of one successful build cycle."""

    target: BuildTarget
    destination: Path
    libraries: List[str]
    runtime_libraries: List[str]


@dataclass
class BuildReport:
    """Outcome of a full matrix build."""

    cells: List[BuiltCell] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    dependencies: Dict[str, List[str]] = field(default_factory=dict)
    build_time: float = 0.0


class BuildOrchestrator:
    """
    Drives platform build procedures and collects their artifacts.

    Platform procedures receive the orchestrator itself as their build
    context: they read ``driver_path``, ``driver_name``, ``mode`` and ``arch``
    and issue commands through ``run()``.
    """

    def __init__(self, params: BuildParams, runner: CommandRunner, file_system: FileSystem):
        """
        Initialize the orchestrator.

        Args:
            params: Resolved build parameters
            runner: Command runner used for every toolchain invocation
            file_system: File-system capability used for all copies
        """
        self.params = params
        self.runner = runner
        self.file_system = file_system
        self.state = BuilderState()

    # Build context consumed by platform procedures

    @property
    def driver_name(self) -> str:
        return self.params.driver_name

    @property
    def driver_path(self) -> Path:
        return self.params.driver_path

    @property
    def binding_library(self) -> str:
        return self.params.settings.binding_library

    @property
    def mode(self) -> BuildMode:
        return self.state.mode

    @property
    def arch(self) -> Optional[Architecture]:
        return self.state.arch

    @property
    def dependencies(self) -> Dict[str, List[str]]:
        """Runtime libraries recorded so far, keyed by directory label."""
        return {label: list(names) for label, names in self.state.dependencies.items()}

    def prepare(self, mode: BuildMode, arch: Optional[Architecture]) -> None:
        """Reset the session for a new build cell."""
        self.runner.drain()
        self.state.reset(mode, arch)

    def run(self, command: str) -> str:
        """Run a toolchain command and return its output.

        Raises:
            ExecutionFailed: If the command exits with a non-zero status
        """
        return self.runner.run(command)

    def destination_directory(
        self,
        platform: PlatformDescriptor,
        arch: Optional[Architecture],
        component: Optional[str] = None,
    ) -> Path:
        """Output directory: ``<bin>/<driver>/<platform dir>/<component>``.

        ``component`` defaults to the current build mode.
        """
        return (
            self.params.bin_root
            / self.driver_name
            / directory_for(platform, arch)
            / (component if component is not None else str(self.mode))
        )

    # Artifact collection

    def copy_extension_binaries(
        self,
        bin_path: str,
        platform: PlatformDescriptor,
        arch: Optional[Architecture],
    ) -> List[str]:
        """Copy driver, binding and sidecar libraries out of the toolchain output.

        Returns:
            File names copied, in copy order

        Raises:
            LibraryMappingError: If the platform cannot name the libraries
        """
        libraries = files_to_copy(platform, self.driver_name, self.binding_library)
        destination = self.destination_directory(platform, arch)
        for library in libraries:
            log_detail(f"Copying extension library: {library}")
            self._copy_file(library, Path(bin_path), destination)
        return libraries

    def copy_runtime_libraries(
        self,
        runtime_path: str,
        platform: PlatformDescriptor,
        arch: Optional[Architecture],
    ) -> List[str]:
        """Bundle every library with the platform's extension from ``runtime_path``.

        Returns:
            File names copied
        """
        suffix = f".{platform.library_extension}"
        destination = self.destination_directory(platform, arch)
        copied = []
        for file_name in self.file_system.list_directory(Path(runtime_path)):
            if not file_name.endswith(suffix):
                continue
            log_detail(f"Copying Swift runtime library: {file_name}")
            self._copy_file(file_name, Path(runtime_path), destination)
            copied.append(file_name)
        return copied

    def _copy_file(self, file_name: str, origin: Path, destination: Path) -> None:
        """Copy with overwrite semantics, creating the destination if needed."""
        if not self.file_system.file_exists(destination):
            self.file_system.create_directory(destination, recursive=True)

        target = destination / file_name
        if self.file_system.file_exists(target):
            self.file_system.remove_file(target)
        self.file_system.copy_file(origin / file_name, target)

    # Build cycles

    def build_cell(
        self,
        platform: PlatformDescriptor,
        arch: Optional[Architecture],
        mode: BuildMode,
    ) -> BuiltCell:
        """Run one full build cycle for a matrix cell.

        Raises:
            ExecutionFailed: If any toolchain command fails
            LibraryMappingError: If library names cannot be resolved
            OSError: If copying fails
        """
        self.prepare(mode, arch)
        target = BuildTarget(platform_id=platform.id, arch=arch, mode=mode)

        bin_path = platform.build(platform, self)
        logger.debug(f"{target}: toolchain output directory {bin_path}")
        libraries = self.copy_extension_binaries(bin_path, platform, arch)

        runtime_libraries: List[str] = []
        runtime_path = platform.find_runtime_directory(platform, self)
        if runtime_path is not None:
            logger.debug(f"{target}: runtime libraries in {runtime_path}")
            runtime_libraries = self.copy_runtime_libraries(runtime_path, platform, arch)
        self.state.dependencies[directory_for(platform, arch)] = runtime_libraries

        return BuiltCell(
            target=target,
            destination=self.destination_directory(platform, arch),
            libraries=libraries,
            runtime_libraries=runtime_libraries,
        )

    def build_all(
        self,
        platforms: Sequence[PlatformDescriptor],
        modes: Sequence[BuildMode],
        archs: Sequence[Architecture],
    ) -> BuildReport:
        """Build every matrix cell in mode -> platform -> architecture order.

        Stops at the first failure; the exception propagates unchanged.
        """
        start_time = time.time()
        report = BuildReport()

        def skip(platform: PlatformDescriptor, arch: Architecture, mode: BuildMode) -> None:
            log(f"Skipping {arch} build for {platform.name}")
            report.skipped.append(f"{platform.id}-{mode}-{arch}")

        cells = list(expand_matrix(modes, platforms, archs, on_skip=skip))
        for index, cell in enumerate(cells, start=1):
            with TimedLogger(f"Building for: {cell.target}", phase=(index, len(cells))):
                report.cells.append(self.build_cell(cell.platform, cell.arch, cell.mode))

        report.dependencies = self.dependencies
        report.build_time = time.time() - start_time
        return report

    # Manifest

    def make_manifest(
        self,
        platforms: Sequence[PlatformDescriptor],
        modes: Sequence[BuildMode],
        archs: Sequence[Architecture],
        configuration: Optional[ExtensionConfiguration] = None,
    ) -> ExtensionManifest:
        """Manifest describing the cells of this session."""
        return ExtensionManifest(
            name=self.driver_name,
            platforms=tuple(platforms),
            archs=tuple(archs),
            modes=tuple(modes),
            dependencies=self.dependencies,
            configuration=configuration if configuration is not None else ExtensionConfiguration.standard(),
            binding_library=self.binding_library,
            bin_location=self.params.bin_location,
        )

    def write_manifest(self, manifest: ExtensionManifest, encoder: Optional[SectionEncoder] = None) -> Path:
        """Encode the manifest and write it to ``<bin>/<driver>.<ext>``.

        Raises:
            EncodingFailed: If a manifest value cannot be rendered
        """
        log(f"Creating .{self.params.settings.manifest_extension} file")
        encoder = encoder if encoder is not None else SectionEncoder(separate_sections=True)
        content = encoder.encode(manifest.sections())

        output_path = self.params.manifest_path
        if not self.file_system.file_exists(output_path.parent):
            self.file_system.create_directory(output_path.parent, recursive=True)
        self.file_system.write_text_file(output_path, content, encoding="utf-8")
        return output_path
