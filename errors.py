"""
Health CLI error taxonomy.
Each error carries the code, fix hint and follow-up commands that the
response layer turns into a failure envelope.
"""

from typing import List, Optional

from responses import NextAction, COMMON_ACTIONS


class HealthCLIError(Exception):
    """Base class for failures reported to the user as an error envelope."""

    code = "HEALTH_CLI_ERROR"
    fix = "Run 'health' to see available commands"

    def __init__(self, message: str, fix: Optional[str] = None,
                 next_actions: Optional[List[NextAction]] = None):
        super().__init__(message)
        self.message = message
        if fix is not None:
            self.fix = fix
        self.next_actions = next_actions if next_actions is not None else [COMMON_ACTIONS["ROOT"]]


class InvalidRangeError(HealthCLIError):
    """Day count outside the accepted window."""

    code = "INVALID_DAYS_RANGE"


class ExportNotFoundError(HealthCLIError):
    """Import path does not exist."""

    code = "FILE_NOT_FOUND"
    fix = "Check the file path and ensure the file exists"


class ExportTooLargeError(HealthCLIError):
    """Import file exceeds the configured size limit."""

    code = "FILE_TOO_LARGE"
    fix = "Use a smaller Apple Health export or process in chunks"


class MalformedImportError(HealthCLIError):
    """Document is not a recognizable Apple Health export."""

    code = "PARSE_ERROR"
    fix = "Ensure the file is a valid Apple Health export XML"


class UsageError(HealthCLIError):
    """Command line could not be parsed."""

    code = "INVALID_ARGUMENTS"
    fix = "Run 'health' to see available commands and their options"
