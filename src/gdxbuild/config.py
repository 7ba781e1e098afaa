"""Builder settings.

Defaults for the output layout and naming, with environment overrides:

    GDXBUILD_BIN_FOLDER  - output folder relative to the project (default "bin")
    GDXBUILD_SHELL       - shell used to run toolchain commands (default: probe)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

DEFAULT_BIN_FOLDER = "bin"
DEFAULT_MANIFEST_EXTENSION = "gdextension"
DEFAULT_BINDING_LIBRARY = "SwiftGodot"


@dataclass(frozen=True)
class BuilderSettings:
    """Static configuration shared by the orchestrator and the manifest.

    Attributes:
        bin_folder: Folder (relative to the project) receiving all binaries
        manifest_extension: File extension of the written manifest
        binding_library: Stem of the runtime binding library every driver links
        shell: Explicit shell path, or None to probe the host
    """

    bin_folder: str = DEFAULT_BIN_FOLDER
    manifest_extension: str = DEFAULT_MANIFEST_EXTENSION
    binding_library: str = DEFAULT_BINDING_LIBRARY
    shell: Optional[str] = None

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "BuilderSettings":
        """Create settings, applying GDXBUILD_* environment overrides."""
        env = os.environ if environ is None else environ
        settings = cls()
        bin_folder = env.get("GDXBUILD_BIN_FOLDER")
        if bin_folder:
            settings = replace(settings, bin_folder=bin_folder)
        shell = env.get("GDXBUILD_SHELL")
        if shell:
            settings = replace(settings, shell=shell)
        return settings
