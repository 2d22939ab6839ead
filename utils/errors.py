"""
Defines custom exception classes for the application.
"""

class WorklogException(Exception):
    """Base exception class for the worklog application."""
    pass

class ConfigurationError(WorklogException):
    """Raised when the settings or the project registry are missing or invalid."""
    pass

class HistoryQueryError(WorklogException):
    """Raised when a git history query fails."""
    pass

class OutputTooLargeError(HistoryQueryError):
    """Raised when a git command produces more output than the capture limit allows."""

    def __init__(self, message: str, size: int, limit: int):
        super().__init__(message)
        self.size = size
        self.limit = limit

class GenerationError(WorklogException):
    """Raised when the generation back end fails to produce a report."""
    pass

class GenerationProcessError(GenerationError):
    """Raised when the back end process exits with a non-zero code."""

    def __init__(self, message: str, exit_code: int):
        super().__init__(message)
        self.exit_code = exit_code

class GenerationTimeoutError(GenerationError):
    """Raised when the back end does not finish within the configured timeout."""
    pass

class TemplateError(WorklogException):
    """Raised when a prompt or worklog template cannot be rendered."""
    pass
