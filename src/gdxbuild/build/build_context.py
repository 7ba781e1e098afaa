"""Build Context - parameters and mutable state of a build session.

This module defines:
- BuildParams: Resolved inputs of one run (project, driver, folders)
- BuildTarget: One cell of the build matrix
- BuilderState: Mutable session state owned by the orchestrator

Design:
    BuildParams flows from the CLI into the orchestrator and never changes.
    BuilderState is reset by the orchestrator at the start of every build
    cell; it records the current mode/architecture and the runtime libraries
    discovered so far, which the manifest consumes at the end of the run.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..config import BuilderSettings
from .build_modes import Architecture, BuildMode


def default_driver_name(project_name: str) -> str:
    """Driver package name derived from the project: alphanumerics + "Driver"."""
    return re.sub(r"[^0-9A-Za-z]", "", project_name) + "Driver"


@dataclass(frozen=True)
class BuildParams:
    """Resolved parameters for one gdxbuild run.

    Attributes:
        project_name: Name of the engine project
        driver_name: Name of the Swift package (and of the produced library)
        working_directory: Project root containing the driver package
        settings: Output folder and naming settings
        bin_location: Prefix prepended to every path written to the manifest
    """

    project_name: str
    driver_name: str
    working_directory: Path
    settings: BuilderSettings
    bin_location: str = ""

    @classmethod
    def create(
        cls,
        working_directory: Path,
        settings: BuilderSettings,
        project_name: Optional[str] = None,
        driver_name: Optional[str] = None,
        bin_location: str = "",
    ) -> "BuildParams":
        """Create BuildParams, inferring names the user did not provide."""
        resolved_project = project_name or working_directory.name
        return cls(
            project_name=resolved_project,
            driver_name=driver_name or default_driver_name(resolved_project),
            working_directory=working_directory,
            settings=settings,
            bin_location=bin_location,
        )

    @property
    def driver_path(self) -> Path:
        """Directory of the driver Swift package."""
        return self.working_directory / self.driver_name

    @property
    def bin_root(self) -> Path:
        """Root of the output tree: ``<project>/<bin_folder>``."""
        return self.working_directory / self.settings.bin_folder

    @property
    def manifest_path(self) -> Path:
        """Where the manifest is written: ``<bin_folder>/<driver>.<ext>``."""
        return self.bin_root / f"{self.driver_name}.{self.settings.manifest_extension}"


@dataclass(frozen=True)
class BuildTarget:
    """One build-matrix cell.

    ``arch`` is None for platforms whose toolchain builds every architecture
    into a single output.
    """

    platform_id: str
    arch: Optional[Architecture]
    mode: BuildMode

    def __str__(self) -> str:
        text = f"{self.platform_id}-{self.mode}"
        if self.arch is not None:
            text += f"-{self.arch}"
        return text


@dataclass
class BuilderState:
    """Mutable state of the current build session.

    Attributes:
        mode: Mode of the cell being built
        arch: Architecture of the cell being built (None when not separated)
        dependencies: Runtime library file names keyed by directory label
    """

    mode: BuildMode = BuildMode.DEBUG
    arch: Optional[Architecture] = None
    dependencies: Dict[str, List[str]] = field(default_factory=dict)

    def reset(self, mode: BuildMode, arch: Optional[Architecture]) -> None:
        self.mode = mode
        self.arch = arch
