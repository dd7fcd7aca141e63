import logging
import logging.handlers
import os
import json
import threading
import datetime
from typing import Set
from functools import lru_cache

from utils.formatting import strip_color_formatting

# Kept free of config imports; config.logging_config reads these defaults.
_LEVEL_NAMES = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
_level_name = os.getenv('BASTION_LOG_LEVEL', 'INFO').upper()
DEFAULT_LOG_LEVEL = logging.getLevelName(_level_name) if _level_name in _LEVEL_NAMES else logging.INFO
DEFAULT_LOG_FORMAT = os.getenv('BASTION_LOG_FORMAT', 'standard')
DEFAULT_LOG_DIR = os.getenv(
    'BASTION_LOG_DIR',
    os.path.join(os.path.dirname(os.path.dirname(__file__)), 'logs')
)

_configured_loggers: Set[str] = set()
_debug_lock = threading.Lock()
_debug_enabled = False

class LoggerError(Exception):
    """Custom exception for logger related errors"""
    pass

class ColorCodeFilter(logging.Filter):
    """Removes inline colour formatting codes before a record is emitted"""
    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        record.msg = strip_color_formatting(message)
        record.args = None
        return True

class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging"""
    def format(self, record):
        log_data = {
            'timestamp': datetime.datetime.fromtimestamp(record.created).isoformat(),
            'name': record.name,
            'level': record.levelname,
            'message': record.getMessage(),
            'module': record.module,
            'process': record.process,
            'thread': record.thread,
            'thread_name': record.threadName
        }
        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)
        return json.dumps(log_data)

@lru_cache(maxsize=None)
def setup_logger(
    name: str,
    log_format: str = DEFAULT_LOG_FORMAT,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
    env: str = 'development',
    log_level: int = DEFAULT_LOG_LEVEL,
    log_dir: str = DEFAULT_LOG_DIR
) -> logging.Logger:
    """
    Set up and return a logger instance with enhanced features

    Args:
        name: Logger name
        log_format: 'standard' or 'json'
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
        env: Environment ('development', 'production', 'testing')
        log_level: Logging level
        log_dir: Directory to store log files

    Returns:
        logging.Logger: Configured logger instance

    Raises:
        LoggerError: If logger configuration fails
    """
    if not name or not isinstance(name, str):
        raise LoggerError("Logger name must be a non-empty string")

    try:
        logger = logging.getLogger(name)

        if logger.handlers:
            return logger

        logger.setLevel(logging.DEBUG if _debug_enabled else log_level)

        # Create log directory
        os.makedirs(log_dir, exist_ok=True)

        # Create handlers
        handlers = []

        # Main log file handler
        main_log_path = os.path.join(log_dir, f"bastion_{env}.log")
        fh = logging.handlers.RotatingFileHandler(
            main_log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        handlers.append(fh)

        # Error log file handler
        error_log_path = os.path.join(log_dir, f"bastion_error_{env}.log")
        error_fh = logging.handlers.RotatingFileHandler(
            error_log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        error_fh.setLevel(logging.ERROR)
        handlers.append(error_fh)

        # Console handler
        ch = logging.StreamHandler()
        handlers.append(ch)

        # Set formatters
        if log_format.lower() == 'json':
            formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - [%(process)d:%(thread)d] - '
                '%(levelname)s - %(module)s - %(message)s'
            )

        # Configure handlers
        color_filter = ColorCodeFilter()
        for handler in handlers:
            handler.setFormatter(formatter)
            handler.addFilter(color_filter)
            logger.addHandler(handler)

        logger.propagate = False
        _configured_loggers.add(name)

        return logger

    except Exception as e:
        raise LoggerError(f"Failed to setup logger: {str(e)}") from e

def set_debug_logging(enabled: bool, base_level: int = DEFAULT_LOG_LEVEL) -> None:
    """Switch every logger created by setup_logger between DEBUG and base_level"""
    global _debug_enabled
    with _debug_lock:
        _debug_enabled = enabled
        level = logging.DEBUG if enabled else base_level
        for name in _configured_loggers:
            logging.getLogger(name).setLevel(level)

def is_debug_logging() -> bool:
    return _debug_enabled
