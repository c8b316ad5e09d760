"""
Standard exit codes for dslm commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

from .domain.operation import ErrorKind

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors

# Application-specific exit codes (64-113 are typically available)
INVALID_REPOSITORY = 64    # Base dir lacks cores/ and dists/ or profiles/
INVALID_DESTINATION = 65   # Destination is not an installation (and no --force)
DESTINATION_CONFLICT = 66  # A path to be written is a real file or directory
NO_CANDIDATE = 67          # Requested version missing or catalog empty
ALREADY_LINKED = 68        # Profile already linked and relinking not allowed
FILESYSTEM_ERROR = 70      # Link or directory operation failed
INTERRUPTED = 130          # Terminated by Ctrl+C (SIGINT) or selection cancelled

ERROR_KIND_EXIT_CODES = {
    ErrorKind.INVALID_REPOSITORY: INVALID_REPOSITORY,
    ErrorKind.INVALID_DESTINATION: INVALID_DESTINATION,
    ErrorKind.DESTINATION_CONFLICT: DESTINATION_CONFLICT,
    ErrorKind.NO_CANDIDATE: NO_CANDIDATE,
    ErrorKind.ALREADY_LINKED: ALREADY_LINKED,
    ErrorKind.CANCELLED: INTERRUPTED,
    ErrorKind.FILESYSTEM: FILESYSTEM_ERROR,
}


def get_exit_code_for_kind(kind: Optional[ErrorKind]) -> int:
    """
    Get the exit code for a switch failure kind.

    Args:
        kind: The failure kind, or None for success

    Returns:
        Appropriate exit code
    """
    if kind is None:
        return SUCCESS
    return ERROR_KIND_EXIT_CODES.get(kind, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class InvalidRepositoryError(CommandError):
    """Raised when the base dir is not a usable repository."""
    def __init__(self, message: str):
        super().__init__(message, INVALID_REPOSITORY)


class SwitchError(CommandError):
    """Raised when a switch operation aborts."""
    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message, get_exit_code_for_kind(kind) if kind else GENERAL_ERROR)
        self.kind = kind
