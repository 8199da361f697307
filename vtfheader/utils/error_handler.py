"""
VTF Header Parser - Error Handler
Error bookkeeping for batch parsing
"""

import traceback
import logging
import json
import time
import inspect
from pathlib import Path
from typing import Dict, List, Optional, Any, Callable
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Error severity levels"""
    INFO = 1
    WARNING = 2
    ERROR = 3
    CRITICAL = 4
    FATAL = 5


class ErrorCategory(Enum):
    """Error categories"""
    CONFIGURATION = "Configuration"
    FILE_IO = "File I/O"
    PARSING = "Parsing"
    UNKNOWN = "Unknown"


@dataclass
class ErrorInfo:
    """Detailed error information"""
    timestamp: float
    severity: ErrorSeverity
    category: ErrorCategory
    message: str
    error_code: str
    error_type: str = ""
    module: str = ""
    function: str = ""
    line_number: int = 0
    stack_trace: str = ""
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'timestamp': self.timestamp,
            'severity': self.severity.name,
            'category': self.category.value,
            'message': self.message,
            'error_code': self.error_code,
            'error_type': self.error_type,
            'module': self.module,
            'function': self.function,
            'line_number': self.line_number,
            'stack_trace': self.stack_trace,
            'context': self.context
        }

    def to_string(self, include_stack: bool = False) -> str:
        """Convert to string representation"""
        parts = [
            f"[{time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(self.timestamp))}]",
            f"{self.severity.name}",
            f"({self.category.value})",
            f"{self.error_code}:",
            self.message
        ]

        if include_stack and self.stack_trace:
            parts.append(f"\nStack Trace:\n{self.stack_trace}")

        return " ".join(parts)


class ErrorHandler:
    """Collects, logs and reports errors raised while parsing files"""

    # Error code definitions
    ERROR_CODES = {
        # Configuration errors (1000-1999)
        'CONFIG_1001': "Configuration file not found",
        'CONFIG_1002': "Invalid configuration format",

        # File I/O errors (2000-2999)
        'FILE_2001': "File not found",
        'FILE_2002': "Permission denied",
        'FILE_2006': "Read error",

        # Parsing errors (3000-3999)
        'PARSE_3000': "VTF decode error",
        'PARSE_3001': "Invalid file signature",
        'PARSE_3006': "Truncated input",
        'PARSE_3007': "Invalid resource count",
        'PARSE_3008': "Invalid resource offset",

        # Unknown errors (9000-9999)
        'UNKNOWN_9001': "Unknown error occurred"
    }

    def __init__(self, log_dir: Optional[str] = None):
        self.error_log: List[ErrorInfo] = []
        self.error_callbacks: List[Callable] = []

        # Statistics
        self.error_count = 0
        self.warning_count = 0

        # Error files are only written when a directory is given
        self.log_dir = Path(log_dir) if log_dir else None
        if self.log_dir:
            self.log_dir.mkdir(parents=True, exist_ok=True)

    def add_error_callback(self, callback: Callable):
        """Add callback for error events"""
        self.error_callbacks.append(callback)

    def handle_error(self, error: Exception, severity: ErrorSeverity = ErrorSeverity.ERROR,
                     category: ErrorCategory = ErrorCategory.UNKNOWN,
                     error_code: str = "UNKNOWN_9001",
                     context: Optional[Dict[str, Any]] = None) -> ErrorInfo:
        """
        Record and log an error

        Args:
            error: Exception object
            severity: Error severity
            category: Error category
            error_code: Error code
            context: Additional context information

        Returns:
            The recorded ErrorInfo
        """
        # Get caller information
        frame = inspect.currentframe().f_back

        error_info = ErrorInfo(
            timestamp=time.time(),
            severity=severity,
            category=category,
            message=str(error),
            error_code=error_code,
            error_type=type(error).__name__,
            module=frame.f_globals.get('__name__', ''),
            function=frame.f_code.co_name,
            line_number=frame.f_lineno,
            stack_trace="".join(traceback.format_exception(type(error), error, error.__traceback__)),
            context=context or {}
        )

        # Update statistics
        if severity in [ErrorSeverity.ERROR, ErrorSeverity.CRITICAL, ErrorSeverity.FATAL]:
            self.error_count += 1
        elif severity == ErrorSeverity.WARNING:
            self.warning_count += 1

        self.error_log.append(error_info)
        self._log_error(error_info)

        # Notify callbacks
        for callback in self.error_callbacks:
            try:
                callback(error_info)
            except Exception as e:
                logger.warning(f"Error callback failed: {e}")

        if severity in [ErrorSeverity.CRITICAL, ErrorSeverity.FATAL]:
            self._save_error_report(error_info)

        return error_info

    def describe(self, error_code: str) -> str:
        return self.ERROR_CODES.get(error_code, self.ERROR_CODES['UNKNOWN_9001'])

    def _log_error(self, error_info: ErrorInfo):
        """Log error to appropriate channels"""
        log_message = error_info.to_string()

        if error_info.severity in [ErrorSeverity.CRITICAL, ErrorSeverity.FATAL]:
            logger.critical(log_message)
        elif error_info.severity == ErrorSeverity.ERROR:
            logger.error(log_message)
        elif error_info.severity == ErrorSeverity.WARNING:
            logger.warning(log_message)
        else:
            logger.info(log_message)

        self._log_to_file(error_info)

    def _log_to_file(self, error_info: ErrorInfo):
        """Append error to the daily error log"""
        if not self.log_dir:
            return

        date_str = time.strftime("%Y-%m-%d")
        log_file = self.log_dir / f"errors_{date_str}.log"

        try:
            with open(log_file, 'a', encoding='utf-8') as f:
                f.write(error_info.to_string(include_stack=True) + "\n\n")
        except OSError as e:
            logger.warning(f"Failed to write error to log file: {e}")

    def _save_error_report(self, error_info: ErrorInfo):
        """Save detailed error report"""
        if not self.log_dir:
            return

        report_dir = self.log_dir / "reports"
        report_dir.mkdir(exist_ok=True)

        timestamp = time.strftime("%Y%m%d_%H%M%S")
        report_file = report_dir / f"error_report_{timestamp}.json"

        try:
            with open(report_file, 'w', encoding='utf-8') as f:
                json.dump(error_info.to_dict(), f, indent=2, default=str)
            logger.info(f"Error report saved: {report_file}")
        except OSError as e:
            logger.warning(f"Failed to save error report: {e}")

    def get_error_summary(self) -> Dict[str, Any]:
        """Get error handling summary"""
        return {
            'total_errors': self.error_count,
            'total_warnings': self.warning_count,
            'recent_errors': [e.to_dict() for e in self.error_log[-10:]]  # Last 10 errors
        }

    def clear_log(self):
        """Clear error log"""
        self.error_log.clear()
        self.error_count = 0
        self.warning_count = 0

    def get_errors_by_severity(self, severity: ErrorSeverity) -> List[ErrorInfo]:
        return [e for e in self.error_log if e.severity == severity]

    def get_errors_by_category(self, category: ErrorCategory) -> List[ErrorInfo]:
        return [e for e in self.error_log if e.category == category]

    def get_error_codes(self) -> List[str]:
        """Get list of all error codes encountered"""
        return sorted(set(e.error_code for e in self.error_log))

    def create_error_report(self, output_path: str) -> bool:
        """Write all recorded errors to a JSON report"""
        report = {
            'summary': self.get_error_summary(),
            'errors': [e.to_dict() for e in self.error_log],
            'statistics': {
                'start_time': min(e.timestamp for e in self.error_log) if self.error_log else 0,
                'end_time': max(e.timestamp for e in self.error_log) if self.error_log else 0,
                'error_codes': self.get_error_codes(),
                'most_common_error': self._get_most_common_error()
            }
        }

        try:
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(report, f, indent=2, default=str)
        except OSError as e:
            logger.error(f"Failed to create error report: {e}")
            return False

        logger.info(f"Error report created: {output_path}")
        return True

    def _get_most_common_error(self) -> Optional[Dict[str, Any]]:
        if not self.error_log:
            return None

        error_counts: Dict[str, int] = {}
        for error in self.error_log:
            error_counts[error.error_code] = error_counts.get(error.error_code, 0) + 1

        most_common_code = max(error_counts, key=error_counts.get)
        return {
            'error_code': most_common_code,
            'description': self.describe(most_common_code),
            'count': error_counts[most_common_code]
        }
