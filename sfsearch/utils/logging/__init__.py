"""Structured logging for the Salesforce search helpers."""

from .logger import StructuredLogger
from .multi_file_logger import MultiFileLogger, get_multi_file_logger, reset_multi_file_logger
from .framework import SmartLogger, get_smart_logger, log_execution, log_operation

__all__ = [
    "StructuredLogger",
    "MultiFileLogger",
    "get_multi_file_logger",
    "reset_multi_file_logger",
    "SmartLogger",
    "get_smart_logger",
    "log_execution",
    "log_operation",
]
