"""Exception hierarchy for gdxbuild.

Every fatal condition raised by the build pipeline derives from GdxBuildError
and carries a ``category`` used by the CLI when reporting the failure:

    environment  - no usable shell, unsupported host, invalid target selection
    execution    - an external command exited with a non-zero status
    mapping      - a platform could not resolve the library names for a driver
    encoding     - a manifest value could not be serialized (or parsed back)

Runtime-dependency discovery misses are not errors; discovery procedures
return None instead.
"""

from typing import Optional


class GdxBuildError(Exception):
    """Base class for all gdxbuild errors."""

    category = "error"


class ShellNotFoundError(GdxBuildError):
    """Raised when no command shell can be located on the host."""

    category = "environment"


class UnsupportedHostError(GdxBuildError):
    """Raised when the host OS or CPU architecture is not supported."""

    category = "environment"


class TargetValidationError(GdxBuildError):
    """Raised when the requested targets cannot be built on this host."""

    category = "environment"


class ExecutionFailed(GdxBuildError):
    """Raised when an external command exits with a non-zero status.

    Attributes:
        exit_code: Process exit status
        command: Command string that was executed (if known)
    """

    category = "execution"

    def __init__(self, exit_code: int, command: Optional[str] = None):
        self.exit_code = exit_code
        self.command = command
        message = f"Command failed with exit code {exit_code}"
        if command:
            message += f": {command}"
        super().__init__(message)


class LibraryMappingError(GdxBuildError):
    """Raised when a platform cannot resolve library file names for a driver."""

    category = "mapping"


class EncodingFailed(GdxBuildError):
    """Raised when a manifest value cannot be rendered as text."""

    category = "encoding"


class DecodingFailed(GdxBuildError):
    """Raised when manifest text cannot be parsed back into sections."""

    category = "encoding"
