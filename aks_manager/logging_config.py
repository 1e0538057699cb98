"""Logging for aks-mgr: warnings on stderr plus an optional full log file."""

import logging
import os
import sys
from pathlib import Path

from aks_manager.exceptions import ConfigurationError

LOG_LEVEL_ENV = "AKS_MANAGER_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# The Azure SDK and its HTTP stack log every request and response header at INFO
NOISY_LOGGERS = (
    "azure",
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.identity",
    "msal",
    "urllib3",
)


def _resolve_level(level: str | None, verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ConfigurationError(
            f"Unknown log level '{name}'", f"Set via {LOG_LEVEL_ENV} or --verbose"
        )
    return resolved


def setup_logging(
    level: str | None = None, log_file: Path | None = None, verbose: bool = False
) -> None:
    """
    Configure the root logger for a CLI run.

    The console handler only shows warnings unless ``verbose`` is set, so
    command output is not interleaved with log lines. The log file, when
    given, always receives everything at or above ``level``.

    Args:
        level: Level name; defaults to ``AKS_MANAGER_LOG_LEVEL`` or INFO
        log_file: Optional file that receives the full log
        verbose: Force DEBUG and echo it to the console
    """
    root_level = _resolve_level(level, verbose)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            root_logger.warning(f"Cannot write log file {log_file}: {e}")
        else:
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger; use as ``logger = get_logger(__name__)``."""
    return logging.getLogger(name)
