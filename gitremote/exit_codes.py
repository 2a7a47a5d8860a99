"""
Exit codes and error types for gitremote.

Every failure a query can produce maps to one error class here, and every
error class carries the exit code the CLI should use for it.
"""
from typing import Optional, Sequence

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NO_VERSIONS = 64         # No semantic-version tags matched
EXECUTION_ERROR = 65     # git ls-remote (or its environment) failed
CONFIG_ERROR = 66        # Configuration file error
PARSE_ERROR = 70         # Output received but not understood
PARTIAL_SUCCESS = 71     # Some repositories resolved, some failed
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for exceptions raised outside our own hierarchy
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': EXECUTION_ERROR,
    'PermissionError': EXECUTION_ERROR,
    'TimeoutError': EXECUTION_ERROR,
    'ValueError': USAGE_ERROR,
    'JSONDecodeError': CONFIG_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, GitRemoteError):
        return exc.exit_code
    return EXCEPTION_EXIT_CODES.get(exc.__class__.__name__, GENERAL_ERROR)


class GitRemoteError(Exception):
    """
    Base error for gitremote. Carries the exit code the CLI should use.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ExecutionError(GitRemoteError):
    """Raised when the git command could not run or exited non-zero."""
    def __init__(
        self,
        message: str,
        argv: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message, EXECUTION_ERROR)
        self.argv = list(argv) if argv is not None else []
        self.returncode = returncode
        self.stderr = stderr


class ParseError(GitRemoteError):
    """Raised when ls-remote output holds no recognizable answer."""
    def __init__(self, message: str, output: str = ""):
        super().__init__(message, PARSE_ERROR)
        self.output = output


class NoVersionsError(GitRemoteError):
    """Raised when no tag survives the prefix filter and semver check."""
    def __init__(self, message: str = "no versions present"):
        super().__init__(message, NO_VERSIONS)


class ConfigError(GitRemoteError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class PartialSuccessError(GitRemoteError):
    """Raised when some repositories resolve and some fail."""
    def __init__(self, message: str, succeeded: int = 0, failed: int = 0):
        super().__init__(message, PARTIAL_SUCCESS)
        self.succeeded = succeeded
        self.failed = failed
