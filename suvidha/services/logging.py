"""Logging setup shared by the API server and the seed CLI.

Every record goes to stdout and to a log file. The level comes from the caller
(settings.log_level) or the LOG_LEVEL env var, default INFO.
"""

import logging
import os
import sys
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Driver loggers that flood DEBUG output with per-statement noise
NOISY_LOGGERS = ("aiosqlite", "sqlalchemy.engine", "multipart")


def get_log_level(level_name: str | None = None) -> int:
    """Resolve a level name ("debug", "WARNING", ...) to a logging constant.

    Unknown names resolve to INFO.
    """
    name = (level_name or os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _build_handlers(log_path: Path, level: int) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(log_path, encoding="utf-8"),
    ]
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_server_logging(log_file: str = "logs/server.log", level_name: str | None = None) -> None:
    """
    Configure the root logger.

    Args:
        log_file: Path to log file; parent directories are created
        level_name: Optional level override (e.g. "DEBUG")

    Calling it again replaces the handlers installed by the previous call.
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_level = get_log_level(level_name)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    root_logger.setLevel(log_level)
    for handler in _build_handlers(log_path, log_level):
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


__all__ = ["get_log_level", "setup_server_logging"]
