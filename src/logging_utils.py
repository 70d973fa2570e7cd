# src/logging_utils.py
"""Central logging setup: console always, file when configured."""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

_LOGGER_INITIALIZED = False

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def init_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configure the root logger with a stdout handler and an optional file handler.
    Only the first call has an effect.
    """
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        root.handlers.clear()

    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setFormatter(formatter)
        root.addHandler(fh)

    _LOGGER_INITIALIZED = True

    logging.getLogger(__name__).info("Logging initialized (level=%s, file=%s)", level, log_file)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the application namespace."""
    return logging.getLogger(name if name else "papertrade")
