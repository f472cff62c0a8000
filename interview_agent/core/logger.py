import logging
import sys
import time
import json
import re
from functools import wraps
from pathlib import Path
from typing import Callable, Any, Optional, Union
from contextvars import ContextVar

from logging.handlers import RotatingFileHandler

from interview_agent.core.config import settings

# Context variable for the pipeline run's correlation ID
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

# Patterns for secrets that should be masked in logs
SECRET_PATTERNS = [
    (re.compile(r'(api[_-]?key\s*[=:]\s*)["\']?[\w-]{20,}["\']?', re.IGNORECASE), r'\1***MASKED***'),
    (re.compile(r'(key\s*[=:]\s*)["\']?sk-[\w-]+["\']?', re.IGNORECASE), r'\1***MASKED***'),
    (re.compile(r'(bearer\s+)[\w.-]{20,}', re.IGNORECASE), r'\1***MASKED***'),
    (re.compile(r'(authorization\s*[=:]\s*)["\']?[\w-]{20,}["\']?', re.IGNORECASE), r'\1***MASKED***'),
]

LOG_FORMAT = "%(asctime)s - [%(correlation_id)s] - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def mask_secrets(text: str) -> str:
    """Mask sensitive values in text."""
    for pattern, replacement in SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SecretMaskingFilter(logging.Filter):
    """Filter to mask secrets in log messages."""

    def filter(self, record):
        if isinstance(record.msg, str):
            record.msg = mask_secrets(record.msg)
        if record.args:
            record.args = tuple(
                mask_secrets(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


class CorrelationIdFilter(logging.Filter):
    """Filter to inject correlation ID into log records."""

    def filter(self, record):
        correlation_id = correlation_id_var.get()
        record.correlation_id = correlation_id if correlation_id else "N/A"
        return True


class JsonFormatter(logging.Formatter):
    """Formatter for structured JSON logging."""

    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, 'correlation_id', 'N/A'),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Stage results attach their outcome via extra={"extra_data": {...}}
        if hasattr(record, 'extra_data'):
            log_data.update(record.extra_data)

        return json.dumps(log_data)


class ColorFormatter(logging.Formatter):
    """Custom formatter to add colors to console output."""

    grey = "\x1b[38;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"

    FORMATS = {
        logging.DEBUG: grey + LOG_FORMAT + reset,
        logging.INFO: grey + LOG_FORMAT + reset,
        logging.WARNING: yellow + LOG_FORMAT + reset,
        logging.ERROR: red + LOG_FORMAT + reset,
        logging.CRITICAL: bold_red + LOG_FORMAT + reset
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt, datefmt=DATE_FORMAT)
        return formatter.format(record)


def setup_log_file(log_dir: Path, clear_log: bool = False) -> Path:
    """
    Creates the log directory and optionally truncates the current log file.
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "interview_agent.log"

    if clear_log and log_file.exists():
        log_file.write_text("")
    return log_file


def configure_logger(
    name: str,
    log_file: Optional[Path],
    log_level: int = logging.INFO,
    use_json: bool = False,
    mask_secrets: bool = True,
) -> logging.Logger:
    """
    Configures the logger handlers and filters.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Prevent adding handlers multiple times
    if logger.handlers:
        return logger

    correlation_filter = CorrelationIdFilter()
    secret_filter = SecretMaskingFilter() if mask_secrets else None

    # Console goes to stderr: stdout is reserved for the final JSON table
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColorFormatter())
    console_handler.addFilter(correlation_filter)
    if secret_filter:
        console_handler.addFilter(secret_filter)
    logger.addHandler(console_handler)

    if log_file is not None:
        # Rotate after 5MB, keep 5 backup files
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5*1024*1024,
            backupCount=5,
            encoding="utf-8"
        )
        if use_json:
            file_handler.setFormatter(JsonFormatter(datefmt=DATE_FORMAT))
        else:
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        file_handler.addFilter(correlation_filter)
        if secret_filter:
            file_handler.addFilter(secret_filter)
        logger.addHandler(file_handler)

    return logger


def setup_logger(
    name: str = "interview_agent",
    log_level: Optional[int] = None,
    clear_log: bool = False,
    use_json: bool = False,
    mask_secrets: bool = True,
    log_dir: Union[str, Path, None] = None,
    to_file: bool = True,
) -> logging.Logger:
    """
    Sets up a logger with console (colored) and file (rotating) handlers.

    Args:
        name: Logger name
        log_level: Logging level (DEBUG when DEBUG_MODE is set, INFO otherwise)
        clear_log: If True, clears the log file at startup (useful for fresh runs)
        use_json: If True, uses JSON formatter for file output
        mask_secrets: If True, masks sensitive values like API keys in logs
        log_dir: Directory for the rotating log file (defaults to LOG_DIR)
        to_file: If False, only the console handler is attached
    """
    if log_level is None:
        log_level = logging.DEBUG if settings.DEBUG_MODE else logging.INFO
    log_file = None
    if to_file:
        log_file = setup_log_file(Path(log_dir or settings.LOG_DIR), clear_log)
    return configure_logger(name, log_file, log_level, use_json, mask_secrets)


def set_correlation_id(correlation_id: str):
    """Set the correlation ID for the current context."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Get the correlation ID for the current context."""
    return correlation_id_var.get()


logger = logging.getLogger(__name__)


def log_async_execution_time(func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator to log the execution time of a coroutine function.
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        logger.info(f"Starting async execution of: {func.__name__}")
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(f"Error in async {func.__name__} after {duration:.4f} seconds: {str(e)}")
            raise
        duration = time.perf_counter() - start_time
        logger.info(f"Finished async execution of: {func.__name__} in {duration:.4f} seconds")
        return result
    return wrapper
