"""
VTF Header Parser - Utilities Module
Logging and error bookkeeping helpers
"""

from .logger import Logger, LogLevel, LogFormatter, JSONFormatter, setup_logging, get_logger
from .error_handler import ErrorHandler, ErrorSeverity, ErrorCategory, ErrorInfo

__all__ = [
    # Logging
    'Logger',
    'LogLevel',
    'LogFormatter',
    'JSONFormatter',
    'setup_logging',
    'get_logger',

    # Error Handling
    'ErrorHandler',
    'ErrorSeverity',
    'ErrorCategory',
    'ErrorInfo',
]
