"""
Utils Module
Shared logging and error types.
"""
from .logger import setup_logger, get_logger, get_audit_logger
from .exceptions import (
    CuratorError,
    ConfigurationError,
    PassLogSinkError,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "get_audit_logger",
    "CuratorError",
    "ConfigurationError",
    "PassLogSinkError",
]
