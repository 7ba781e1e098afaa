"""Subprocess utilities for platform-safe shell execution.

This module locates the host command shell and wraps subprocess.Popen so
that every toolchain invocation gets the same platform-specific treatment:

- Windows: CREATE_NO_WINDOW (no console window flashing)
- All platforms: stdin redirected to DEVNULL
"""

import os
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from .errors import ShellNotFoundError

# Shells probed in order on POSIX hosts
POSIX_SHELLS = ("/bin/zsh", "/bin/sh")


def get_subprocess_creation_flags() -> int:
    """Get platform-specific subprocess creation flags.

    Returns:
        - Windows: subprocess.CREATE_NO_WINDOW (prevents console window)
        - Other platforms: 0 (no special flags)
    """
    if sys.platform == "win32":
        return subprocess.CREATE_NO_WINDOW
    return 0


def locate_shell(
    override: Optional[str] = None,
    candidates: Sequence[str] = POSIX_SHELLS,
    exists: Callable[[str], bool] = os.path.exists,
) -> Path:
    """Find the shell used to run toolchain commands.

    Args:
        override: Explicit shell path (e.g. from GDXBUILD_SHELL); used as-is
            when it exists
        candidates: POSIX shells probed in order
        exists: Existence check, injectable for tests

    Returns:
        Path to the shell executable

    Raises:
        ShellNotFoundError: If no usable shell is found
    """
    if override:
        if exists(override):
            return Path(override)
        raise ShellNotFoundError(f"Configured shell does not exist: {override}")

    if sys.platform == "win32":
        comspec = os.environ.get("COMSPEC", r"C:\Windows\System32\cmd.exe")
        if exists(comspec):
            return Path(comspec)
        raise ShellNotFoundError(f"Unable to locate cmd.exe (COMSPEC={comspec})")

    for candidate in candidates:
        if exists(candidate):
            return Path(candidate)

    raise ShellNotFoundError(f"Unable to locate a command shell (tried {', '.join(candidates)})")


def shell_argv(shell: Path, command: str) -> list[str]:
    """Build the argv that runs ``command`` through ``shell``.

    cmd.exe takes ``/c``; everything else takes ``-c``.
    """
    if shell.name.lower() in ("cmd.exe", "cmd"):
        return [str(shell), "/c", command]
    return [str(shell), "-c", command]


def quote_argument(value: str) -> str:
    """Quote a single argument for the host shell.

    Plain paths without special characters are returned unchanged.
    """
    if sys.platform == "win32":
        return subprocess.list2cmdline([value])
    return shlex.quote(value)


def safe_popen(cmd: list[str], **kwargs: Any) -> subprocess.Popen:
    """Execute subprocess.Popen with platform-specific flags.

    Automatically applies:
    - CREATE_NO_WINDOW on Windows (prevents console window)
    - stdin=DEVNULL (prevents console input handle inheritance)

    Args:
        cmd: Command and arguments (same as subprocess.Popen)
        **kwargs: Additional arguments passed to subprocess.Popen

    Returns:
        Popen process handle

    Note:
        - If 'creationflags' is explicitly provided in kwargs,
          it will be OR'd with platform defaults to preserve custom flags.
        - If 'stdin' is explicitly provided in kwargs, it will be used as-is.
    """
    default_flags = get_subprocess_creation_flags()

    if "creationflags" in kwargs:
        kwargs["creationflags"] = kwargs["creationflags"] | default_flags
    elif default_flags:
        kwargs["creationflags"] = default_flags

    # Toolchains must never wait on the terminal for input
    if "stdin" not in kwargs:
        kwargs["stdin"] = subprocess.DEVNULL

    return subprocess.Popen(cmd, **kwargs)
