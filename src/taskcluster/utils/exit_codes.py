"""
Exit codes for the Task Cluster CLI.

Semantic exit codes let scripts tell what happened and react without parsing
output. Each task error maps to exactly one code.
"""

from taskcluster.models import (
    AlreadyExistsError,
    ConflictRetryError,
    InvalidArgumentError,
    InvalidTransitionError,
    NotFoundError,
    StorageUnavailableError,
)

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Storage backend unreachable or failing
ERROR_STORAGE = 4

# Resource not found
ERROR_NOT_FOUND = 5

# Duplicate resource or illegal lifecycle transition
ERROR_CONFLICT = 7

# Concurrent modification still losing after all retries
ERROR_CONFLICT_RETRY = 8


_ERROR_EXIT_CODES: dict[type[Exception], int] = {
    InvalidArgumentError: ERROR_INVALID_ARGS,
    NotFoundError: ERROR_NOT_FOUND,
    AlreadyExistsError: ERROR_CONFLICT,
    InvalidTransitionError: ERROR_CONFLICT,
    ConflictRetryError: ERROR_CONFLICT_RETRY,
    StorageUnavailableError: ERROR_STORAGE,
}


def exit_code_for(error: Exception) -> int:
    """Get the exit code a command should terminate with for *error*."""
    for error_type, code in _ERROR_EXIT_CODES.items():
        if isinstance(error, error_type):
            return code
    return ERROR_GENERAL
