import sys
import logging
import logging.handlers
import time
import json
from pathlib import Path
from typing import Dict, Optional, Any, Union
from dataclasses import dataclass, field
from enum import Enum
import threading

from colorama import Fore, Back, Style, just_fix_windows_console

from vtfheader.config import LoggingConfig

just_fix_windows_console()

# Parent of every module logger in the package
ROOT_LOGGER_NAME = "vtfheader"


class LogLevel(Enum):
    """Logging levels"""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def from_string(cls, level_str: str) -> 'LogLevel':
        """Convert string to LogLevel, INFO when unrecognised"""
        return cls.__members__.get(level_str.upper(), cls.INFO)


@dataclass
class LogEntry:
    """Structured log entry"""
    timestamp: float
    level: LogLevel
    message: str
    logger_name: str = ""
    module: str = ""
    function: str = ""
    line_number: int = 0
    thread_name: str = ""
    extra_data: Dict[str, Any] = field(default_factory=dict)
    exception_info: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'timestamp': self.timestamp,
            'timestamp_iso': time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(self.timestamp)),
            'level': self.level.name,
            'message': self.message,
            'logger': self.logger_name,
            'module': self.module,
            'function': self.function,
            'line_number': self.line_number,
            'thread_name': self.thread_name,
            'extra_data': self.extra_data,
            'exception_info': self.exception_info
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class LogFormatter(logging.Formatter):
    """Log formatter with per-level colours"""

    COLOR_MAP = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Back.WHITE + Style.BRIGHT
    }

    SIMPLE_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'
    DETAILED_FORMAT = '%(asctime)s [%(levelname)s] [%(name)s:%(funcName)s:%(lineno)d] %(message)s'

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None,
                 use_colors: bool = True, detailed: bool = False):
        if fmt is None:
            fmt = self.DETAILED_FORMAT if detailed else self.SIMPLE_FORMAT

        super().__init__(fmt, datefmt)
        self.use_colors = use_colors
        self.detailed = detailed

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        if self.use_colors and record.levelname in self.COLOR_MAP:
            message = f"{self.COLOR_MAP[record.levelname]}{message}{Style.RESET_ALL}"

        return message


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = LogEntry(
            timestamp=record.created,
            level=LogLevel(record.levelno),
            message=record.getMessage(),
            logger_name=record.name,
            module=record.module,
            function=record.funcName,
            line_number=record.lineno,
            thread_name=record.threadName,
            extra_data=getattr(record, 'extra_data', {})
        )

        if record.exc_info:
            log_entry.exception_info = self.formatException(record.exc_info)

        return log_entry.to_json()


class Logger:
    """Configures handlers on the package logger"""

    def __init__(self, name: str = ROOT_LOGGER_NAME,
                 log_dir: Optional[str] = None,
                 level: LogLevel = LogLevel.INFO,
                 max_file_size_mb: int = 10,
                 backup_count: int = 5,
                 enable_console: bool = True,
                 enable_file: bool = False,
                 enable_json: bool = False,
                 detailed_console: bool = False):
        """
        Initialize logger

        Args:
            name: Logger name
            log_dir: Directory for log files
            level: Logging level
            max_file_size_mb: Maximum log file size in MB
            backup_count: Number of backup files to keep
            enable_console: Enable console output
            enable_file: Enable file output
            enable_json: Enable JSON logging
            detailed_console: Use detailed format for console
        """
        self.name = name
        self.log_dir = Path(log_dir) if log_dir else Path.home() / ".vtfheader" / "logs"
        self.level = level
        self.max_file_size = max_file_size_mb * 1024 * 1024
        self.backup_count = backup_count

        self.logger = logging.getLogger(name)
        self.logger.setLevel(level.value)
        self.logger.propagate = False
        self.logger.handlers.clear()

        if enable_file or enable_json:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self.handlers: Dict[str, logging.Handler] = {}
        self._setup_handlers(enable_console, enable_file, enable_json, detailed_console)

        self.start_time = time.time()
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: LoggingConfig) -> 'Logger':
        return cls(
            log_dir=config.log_dir or None,
            level=LogLevel.from_string(config.level),
            max_file_size_mb=config.max_file_size_mb,
            backup_count=config.backup_count,
            enable_console=config.enable_console,
            enable_file=config.enable_file,
            enable_json=config.enable_json,
            detailed_console=config.detailed_console
        )

    def _setup_handlers(self, enable_console: bool, enable_file: bool,
                        enable_json: bool, detailed_console: bool):
        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self.level.value)
            console_handler.setFormatter(LogFormatter(detailed=detailed_console))
            self.logger.addHandler(console_handler)
            self.handlers['console'] = console_handler

        if enable_file:
            file_handler = logging.handlers.RotatingFileHandler(
                filename=self.log_dir / f"{self.name}.log",
                maxBytes=self.max_file_size,
                backupCount=self.backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(self.level.value)
            file_handler.setFormatter(LogFormatter(detailed=True, use_colors=False))
            self.logger.addHandler(file_handler)
            self.handlers['file'] = file_handler

        if enable_json:
            json_handler = logging.handlers.RotatingFileHandler(
                filename=self.log_dir / f"{self.name}_structured.json",
                maxBytes=self.max_file_size,
                backupCount=self.backup_count,
                encoding='utf-8'
            )
            json_handler.setLevel(self.level.value)
            json_handler.setFormatter(JSONFormatter())
            self.logger.addHandler(json_handler)
            self.handlers['json'] = json_handler

    def set_level(self, level: Union[LogLevel, str]):
        """Set logging level"""
        if isinstance(level, str):
            level = LogLevel.from_string(level)

        self.level = level
        self.logger.setLevel(level.value)

        for handler in self.handlers.values():
            handler.setLevel(level.value)

    def add_handler(self, name: str, handler: logging.Handler):
        with self._lock:
            self.logger.addHandler(handler)
            self.handlers[name] = handler

    def remove_handler(self, name: str):
        with self._lock:
            handler = self.handlers.pop(name, None)
            if handler is not None:
                self.logger.removeHandler(handler)

    def get_stats(self) -> Dict[str, Any]:
        """Get logger statistics"""
        return {
            'name': self.name,
            'level': self.level.name,
            'runtime_seconds': time.time() - self.start_time,
            'handlers': list(self.handlers.keys())
        }

    def flush(self):
        with self._lock:
            for handler in self.handlers.values():
                handler.flush()

    def close(self):
        """Close all log handlers"""
        with self._lock:
            for handler in self.handlers.values():
                self.logger.removeHandler(handler)
                handler.close()
            self.handlers.clear()


# Global logger instance
_global_logger = None

def get_logger() -> Optional[Logger]:
    """Get the logger configured by setup_logging, if any"""
    return _global_logger


def setup_logging(config: Optional[LoggingConfig] = None) -> Logger:
    """Configure package logging, replacing any earlier configuration"""
    global _global_logger
    if _global_logger is not None:
        _global_logger.close()

    _global_logger = Logger.from_config(config or LoggingConfig())
    return _global_logger
