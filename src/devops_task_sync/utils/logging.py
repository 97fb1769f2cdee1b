"""Logging configuration for devops task sync.

Every handler installed here carries a :class:`CredentialMaskingFilter`, so
a PAT or an ``Authorization`` value that slips into a message (for instance
inside an exception text from httpx) reaches the console and the log file
only as a masked preview.
"""

import logging
import re
from pathlib import Path

from devops_task_sync.utils.redaction import mask_secret
from devops_task_sync.utils.storage import DEFAULT_CONFIG_DIR

LOG_FILE_NAME = "devops-task-sync.log"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(name)s - %(levelname)s - %(message)s"

# Loggers that log full request lines at INFO.
NOISY_LOGGERS = ("httpx", "httpcore")

CREDENTIAL_PATTERNS = [
    re.compile(r"((?:basic|bearer)\s+)([A-Za-z0-9\-._~+/]{8,}=*)", re.IGNORECASE),
    re.compile(r"""(\b(?:pat|token)["']?\s*[:=]\s*["']?)([^"'\s,}]+)""", re.IGNORECASE),
]


def mask_credentials(message: str) -> str:
    """Mask auth header values and PAT assignments inside a log message.

    Args:
        message: Formatted log message.

    Returns:
        The message with each credential replaced by its masked preview.
    """
    for pattern in CREDENTIAL_PATTERNS:
        message = pattern.sub(lambda m: m.group(1) + mask_secret(m.group(2)), message)
    return message


class CredentialMaskingFilter(logging.Filter):
    """Rewrites records so credentials never leave the process in full."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_credentials(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def _build_handler(handler: logging.Handler, log_level: int, fmt: str, **kwargs) -> logging.Handler:
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(fmt, **kwargs))
    handler.addFilter(CredentialMaskingFilter())
    return handler


def setup_logging(log_level: int = logging.INFO, config_dir: Path | None = None) -> Path:
    """Configure logging for the application.

    Args:
        log_level: Logging level (e.g., logging.INFO, logging.DEBUG).
        config_dir: Directory to store log files. Defaults to ~/.devops-task-sync/

    Returns:
        Path of the log file.
    """
    config_dir = config_dir or DEFAULT_CONFIG_DIR
    config_dir.mkdir(parents=True, exist_ok=True)
    log_file = config_dir / LOG_FILE_NAME

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(
        _build_handler(
            logging.FileHandler(log_file), log_level, FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"
        )
    )
    root_logger.addHandler(_build_handler(logging.StreamHandler(), log_level, CONSOLE_FORMAT))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    return log_file


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
