"""
Centralized console output for gdxbuild.

Every message is prefixed with the elapsed time since launch in MM:SS.cc
format so slow toolchain invocations stand out in the build log.

Example output:
    00:00.01 gdxbuild v0.3.0
    00:00.02 Building for: linux-debug-aarch64
    00:00.02 Running: cd /work/GameDriver && swift build --arch aarch64 --configuration debug
    00:41.87       Copying extension library: GameDriver.so

Toolchain output itself is streamed through echo() without a timestamp, so
compiler diagnostics keep their original layout.

Usage:
    from gdxbuild.output import log, log_phase, log_detail, echo

    log("Creating .gdextension file")
    log_phase(1, 4, "Building for: linux-debug-aarch64")
    log_detail("Copying extension library: GameDriver.so")
"""

import sys
import time
from types import TracebackType
from typing import Optional, TextIO

# Global state for the timer
_start_time: Optional[float] = None
_output_stream: TextIO = sys.stdout
_verbose: bool = True
_output_file: Optional[TextIO] = None


def init_timer(output_stream: Optional[TextIO] = None) -> None:
    """
    Initialize the program timer.

    Args:
        output_stream: Optional output stream (defaults to sys.stdout)
    """
    global _start_time, _output_stream
    _start_time = time.time()
    if output_stream is not None:
        _output_stream = output_stream


def set_verbose(verbose: bool) -> None:
    """
    Set verbose mode for logging.

    Args:
        verbose: If True, all messages are printed. If False, only non-verbose messages.
    """
    global _verbose
    _verbose = verbose


def set_output_file(output_file: Optional[TextIO]) -> None:
    """
    Set a file to receive all output (in addition to the console).

    Args:
        output_file: File object to receive output, or None to disable file output
    """
    global _output_file
    _output_file = output_file


def get_elapsed() -> float:
    """Get elapsed time in seconds since timer initialization."""
    if _start_time is None:
        init_timer()
    return time.time() - _start_time  # type: ignore


def format_timestamp() -> str:
    """Format the current elapsed time as MM:SS.cc."""
    elapsed = get_elapsed()
    minutes = int(elapsed // 60)
    seconds = elapsed % 60
    return f"{minutes:02d}:{seconds:05.2f}"


def _write(text: str) -> None:
    _output_stream.write(text)
    _output_stream.flush()
    if _output_file is not None:
        _output_file.write(text)
        _output_file.flush()


def _print(message: str, end: str = "\n") -> None:
    _write(f"{format_timestamp()} {message}{end}")


def log(message: str, verbose_only: bool = False) -> None:
    """
    Log a message with timestamp.

    Args:
        message: Message to log
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(message)


def log_phase(phase: int, total: int, message: str, verbose_only: bool = False) -> None:
    """
    Log a build phase message.

    Format: [N/M] message
    """
    if verbose_only and not _verbose:
        return
    _print(f"[{phase}/{total}] {message}")


def log_detail(message: str, indent: int = 6, verbose_only: bool = False) -> None:
    """
    Log a detail message (indented).

    Args:
        message: Detail message
        indent: Number of spaces to indent (default 6)
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(f"{' ' * indent}{message}")


def log_header(title: str, version: str) -> None:
    """Log the program banner."""
    _print(f"{title} v{version}")
    _print("")


def log_command(command: str) -> None:
    """Log a shell command right before it is executed."""
    _print(f"Running: {command}")


def echo(chunk: str) -> None:
    """
    Stream raw toolchain output.

    Chunks are written verbatim; a newline is added only when the chunk does
    not already end with one.
    """
    if not _verbose:
        return
    _write(chunk if chunk.endswith("\n") else chunk + "\n")


def log_error(message: str) -> None:
    """Log an error message."""
    _print(f"ERROR: {message}")


def log_warning(message: str) -> None:
    """Log a warning message."""
    _print(f"WARNING: {message}")


def log_success(message: str) -> None:
    """Log a success message."""
    _print(message)


class TimedLogger:
    """
    Context manager for logging with elapsed time tracking.

    Usage:
        with TimedLogger("Building for: linux-debug-aarch64", phase=(1, 2)):
            orchestrator.build_cell(...)
        # Logs "Done (12.34s)" when the block succeeds
    """

    def __init__(self, operation: str, phase: Optional[tuple[int, int]] = None, verbose_only: bool = False):
        self.operation = operation
        self.phase = phase
        self.verbose_only = verbose_only
        self.start_time = 0.0

    def __enter__(self) -> "TimedLogger":
        self.start_time = time.time()
        if self.phase:
            log_phase(self.phase[0], self.phase[1], self.operation, self.verbose_only)
        else:
            log(self.operation, self.verbose_only)
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        del exc_val, exc_tb  # Unused
        elapsed = time.time() - self.start_time
        if exc_type is None:
            log_detail(f"Done ({elapsed:.2f}s)", verbose_only=self.verbose_only)
        return None
