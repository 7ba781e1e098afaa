"""
Command-line interface for gdxbuild.

This module provides the `gdxbuild` CLI tool for building GDExtension drivers
and writing their .gdextension manifest.
"""

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from gdxbuild import __version__
from gdxbuild.build.build_context import BuildParams
from gdxbuild.build.build_modes import Architecture, BuildMode
from gdxbuild.build.build_summary import print_build_summary
from gdxbuild.build.orchestrator import BuildOrchestrator
from gdxbuild.command_runner import CommandRunner
from gdxbuild.config import BuilderSettings
from gdxbuild.errors import GdxBuildError
from gdxbuild.filesystem import LocalFileSystem
from gdxbuild.output import echo, init_timer, log, log_detail, log_error, log_header, log_success, set_verbose
from gdxbuild.platforms import Target, validate_targets
from gdxbuild.subprocess_utils import locate_shell

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    project_dir: Path
    targets: List[Target] = field(default_factory=list)
    modes: List[BuildMode] = field(default_factory=list)
    archs: List[Architecture] = field(default_factory=list)
    project_name: Optional[str] = None
    driver_name: Optional[str] = None
    bin_location: str = ""
    verbose: bool = False


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger for diagnostics (debug level when verbose)."""
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(handler)


def _unique(values: Sequence) -> list:
    return list(dict.fromkeys(values))


def build_command(args: BuildArgs) -> None:
    """Build the driver for every requested target/mode/arch and write the manifest.

    Examples:
        gdxbuild build                         # Host target, debug, host arch
        gdxbuild build -c debug -c release     # Both modes
        gdxbuild build -t ios -c release       # iOS archive (macOS hosts only)
        gdxbuild build -a x86_64 -a aarch64    # Both desktop architectures
    """
    init_timer()
    set_verbose(args.verbose)
    log_header("gdxbuild", __version__)

    try:
        settings = BuilderSettings.from_environment()
        params = BuildParams.create(
            working_directory=args.project_dir.resolve(),
            settings=settings,
            project_name=args.project_name,
            driver_name=args.driver_name,
            bin_location=args.bin_location,
        )

        targets = validate_targets(_unique(args.targets), Target.current())
        modes = _unique(args.modes) or [BuildMode.DEBUG]
        archs = _unique(args.archs) or [Architecture.current()]
        platforms = [target.platform for target in targets]

        log(f"Project: {params.project_name}")
        log_detail(f"Driver: {params.driver_name} ({params.driver_path})")
        log_detail(f"Targets: {', '.join(str(target) for target in targets)}")
        log_detail(f"Modes: {', '.join(str(mode) for mode in modes)}")
        log_detail(f"Architectures: {', '.join(str(arch) for arch in archs)}")
        log_detail(f"Output: {params.bin_root}")

        runner = CommandRunner(locate_shell(settings.shell))
        orchestrator = BuildOrchestrator(params, runner, LocalFileSystem())

        report = orchestrator.build_all(platforms, modes, archs)
        manifest_path = orchestrator.write_manifest(orchestrator.make_manifest(platforms, modes, archs))

        print_build_summary(report, manifest_path=manifest_path, root=params.working_directory)
        log_success("Build successful!")
        sys.exit(0)

    except GdxBuildError as e:
        log_error(f"{e.category}: {e}")
        sys.exit(1)

    except KeyboardInterrupt:
        log("Build interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    except OSError as e:
        log_error(f"io: {e}")
        sys.exit(1)

    except Exception as e:
        log_error(f"Unexpected error: {type(e).__name__}: {e}")

        if args.verbose:
            import traceback

            log("Traceback:")
            echo(traceback.format_exc())

        sys.exit(1)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """gdxbuild - build GDExtension drivers and their manifest."""
    parser = argparse.ArgumentParser(
        prog="gdxbuild",
        description="gdxbuild - build GDExtension drivers across platforms, modes and architectures",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"gdxbuild {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    build_parser = subparsers.add_parser(
        "build",
        help="Build the driver and write the .gdextension manifest",
    )
    build_parser.add_argument(
        "-t",
        "--target",
        dest="targets",
        action="append",
        type=Target,
        choices=list(Target),
        default=[],
        help="Target to build (repeatable, default: host)",
    )
    build_parser.add_argument(
        "-c",
        "--configuration",
        dest="modes",
        action="append",
        type=BuildMode,
        choices=list(BuildMode),
        default=[],
        help="Build mode (repeatable, default: debug)",
    )
    build_parser.add_argument(
        "-a",
        "--arch",
        dest="archs",
        action="append",
        type=Architecture,
        choices=list(Architecture),
        default=[],
        help="Architecture (repeatable, default: host)",
    )
    build_parser.add_argument(
        "-p",
        "--project-name",
        default=None,
        help="Engine project name (default: project directory name)",
    )
    build_parser.add_argument(
        "-d",
        "--driver-name",
        default=None,
        help="Driver package name (default: project name + 'Driver')",
    )
    build_parser.add_argument(
        "--project-dir",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    build_parser.add_argument(
        "--bin-location",
        default="",
        help="Prefix for library paths in the manifest (e.g. res://bin/)",
    )
    build_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show toolchain output and debug diagnostics",
    )

    parsed_args = parser.parse_args(argv)

    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    if not parsed_args.project_dir.is_dir():
        log_error(f"Project directory does not exist: {parsed_args.project_dir}")
        sys.exit(2)

    setup_logging(parsed_args.verbose)

    if parsed_args.command == "build":
        args = BuildArgs(
            project_dir=parsed_args.project_dir,
            targets=parsed_args.targets,
            modes=parsed_args.modes,
            archs=parsed_args.archs,
            project_name=parsed_args.project_name,
            driver_name=parsed_args.driver_name,
            bin_location=parsed_args.bin_location,
            verbose=parsed_args.verbose,
        )
        build_command(args)


if __name__ == "__main__":
    main()
