"""Error handling framework for gitsync."""

import logging
import sys
from enum import Enum
from typing import Dict, Any, Optional, TextIO


class ErrorCategory(Enum):
    """Categories of errors for structured error handling."""
    CONFIGURATION = "configuration"
    GIT_EXECUTABLE = "git_executable"
    REPOSITORY = "repository"
    FILE_IO = "file_io"
    SYSTEM = "system"


class GitSyncError(Exception):
    """Base class for all errors raised by gitsync."""

    category = ErrorCategory.SYSTEM
    error_code = "GITSYNC_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code


class ConfigurationError(GitSyncError, ValueError):
    """Invalid configuration value or command line argument."""
    category = ErrorCategory.CONFIGURATION
    error_code = "CONFIGURATION_INVALID"


class ToolNotFound(GitSyncError):
    """The git executable is missing or cannot be run."""
    category = ErrorCategory.GIT_EXECUTABLE
    error_code = "GIT_NOT_FOUND"


class UnsupportedVersion(GitSyncError):
    """The git executable is older than the minimum supported version."""
    category = ErrorCategory.GIT_EXECUTABLE
    error_code = "GIT_VERSION_TOO_OLD"


class VersionUndetermined(GitSyncError):
    """The output of ``git --version`` could not be parsed."""
    category = ErrorCategory.GIT_EXECUTABLE
    error_code = "GIT_VERSION_UNKNOWN"


class NotASubdirectory(GitSyncError, ValueError):
    """A path expected to live below the base directory does not."""
    category = ErrorCategory.FILE_IO
    error_code = "NOT_A_SUBDIRECTORY"


class CommandExecutionError(GitSyncError):
    """A git process could not be started at all."""
    category = ErrorCategory.REPOSITORY
    error_code = "GIT_COMMAND_NOT_STARTED"


class ErrorHandler:
    """Turns fatal errors into a single diagnostic line and an exit code."""

    def __init__(self):
        self.logger = logging.getLogger('gitsync.error_handler')

    def handle_fatal(
        self,
        error: Exception,
        context: Dict[str, Any] = None,
        stream: Optional[TextIO] = None
    ) -> int:
        """Report a fatal error on stderr and return the process exit code."""
        context = context or {}
        stream = stream if stream is not None else sys.stderr

        if isinstance(error, GitSyncError):
            error_code = error.error_code
            category = error.category.value
            message = error.message
        elif isinstance(error, OSError):
            error_code = "FILE_IO_ERROR"
            category = ErrorCategory.FILE_IO.value
            message = f"File system error: {error}"
        else:
            error_code = "UNEXPECTED_ERROR"
            category = ErrorCategory.SYSTEM.value
            message = f"Unexpected error: {error}"

        self.logger.debug(
            f"Fatal {category} error: {message}",
            extra={
                'operation': 'fatal_error',
                'error_code': error_code,
                'base_dir': context.get('base_dir')
            }
        )

        print(message, file=stream)
        return 1


# Initialize global error handler
error_handler = ErrorHandler()
