"""
Custom Exceptions
Error types raised by the curation engine and its configuration layer.
"""


class CuratorError(Exception):
    """Base error for the calm curator."""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(CuratorError):
    """Rejected category defaults or loop tuning, raised before any pass runs."""
    pass


class PassLogSinkError(CuratorError):
    """Audit sink could not accept a pass log entry."""

    def __init__(self, message: str, category: str = None, pass_number: int = None, **kwargs):
        super().__init__(message, kwargs)
        self.category = category
        self.pass_number = pass_number
