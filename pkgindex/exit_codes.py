"""
Standard exit codes and error types for pkgindex.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Iterable, Optional, Tuple

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NOT_FOUND = 64           # Package not available from any searched repository
NETWORK_ERROR = 65       # Repository could not be reached
CONFIG_ERROR = 66        # Configuration file error
DATA_ERROR = 70          # Data format or validation error
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'ConnectionError': NETWORK_ERROR,
    'TimeoutError': NETWORK_ERROR,
    'ValueError': DATA_ERROR,
    'JSONDecodeError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class ResolutionError(CommandError):
    """
    Base class for failures to resolve a package.

    Carries the package name, the distribution type(s) considered and the
    names of the repositories actually searched.
    """
    kind = "resolution_error"

    def __init__(self, message: str, package: str, types: Iterable[str],
                 repositories: Iterable[str]):
        super().__init__(message, NOT_FOUND)
        self.package = package
        self.types: Tuple[str, ...] = tuple(types)
        self.repositories: Tuple[str, ...] = tuple(repositories)

    def to_dict(self):
        return {
            'package': self.package,
            'types': list(self.types),
            'repositories': list(self.repositories),
        }


class NotFoundError(ResolutionError):
    """No searched repository has the package (or none satisfies the filter)."""
    kind = "not_found"

    def __init__(self, package: str, type: str, repositories: Iterable[str],
                 message: Optional[str] = None):
        repositories = tuple(repositories)
        if message is None:
            searched = ", ".join(repositories) or "<none>"
            message = (f"failed to find {type} for package {package} "
                       f"in active repositories ({searched})")
        super().__init__(message, package, (type,), repositories)

    @property
    def type(self) -> str:
        return self.types[0]


class PackageUnavailableError(ResolutionError):
    """Neither a source nor a binary candidate exists for the package."""
    kind = "unavailable"

    def __init__(self, package: str, types: Iterable[str], repositories: Iterable[str]):
        super().__init__(f"package '{package}' is not available", package, types, repositories)
