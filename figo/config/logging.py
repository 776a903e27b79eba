import logging
import logging.config
import sys
from typing import Dict, Any, List, Optional
from pathlib import Path

from figo.config.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third party loggers that only report problems unless debugging
QUIET_LOGGERS = ("httpx", "httpcore")


def _logging_config(level: str, handlers: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    names: List[str] = list(handlers)
    quiet_level = "DEBUG" if level == "DEBUG" else "WARNING"

    loggers = {"figo": {"level": level, "handlers": names, "propagate": False}}
    for name in QUIET_LOGGERS:
        loggers[name] = {"level": quiet_level, "handlers": names, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT},
            "file": {"format": FILE_LOG_FORMAT, "datefmt": DATE_FORMAT},
        },
        "handlers": handlers,
        "loggers": loggers,
        "root": {"level": "WARNING", "handlers": names},
    }


def setup_logging(log_level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure the ``figo`` logger hierarchy.

    Args:
        log_level: Level of the figo loggers (defaults to ``FIGO_LOG_LEVEL``)
        log_file: Optional rotating log file (defaults to ``FIGO_LOG_FILE``)
    """
    level = (log_level or settings.log_level).upper()
    log_file = log_file or settings.log_file

    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "console",
            "level": level,
        },
    }

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 3,
            "formatter": "file",
            "level": level,
        }

    logging.config.dictConfig(_logging_config(level, handlers))


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the figo namespace."""
    if name == "figo" or name.startswith("figo."):
        return logging.getLogger(name)
    return logging.getLogger(f"figo.{name}")


def mask_sensitive_data(data: Optional[str], visible: int = 4) -> str:
    """Mask tokens and secrets, keeping ``visible`` characters at each end."""
    if not data:
        return ""
    hidden = len(data) - 2 * visible
    if hidden <= 0:
        return "*" * len(data)
    return data[:visible] + "*" * hidden + data[-visible:]
