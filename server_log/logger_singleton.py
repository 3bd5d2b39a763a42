# server_log/logger_singleton.py
"""
Process-wide logger shared by the server, the routes and the manager.

Every module calls getLogger() and gets the same wrapper back, so handlers
are attached exactly once no matter how many times the app is imported.
"""

import logging
import os
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "data_backs"
DEFAULT_LOG_FILE = Path("data_backs.log")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Max log file size 5 MB, keep 3 backups
MAX_LOG_SIZE = 5 * 1024 * 1024
BACKUP_COUNT = 3


class LoggerSingleton:
    def __init__(self, log_file: Union[str, Path], level: str = "INFO"):
        self.log_file = Path(log_file)
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(level.upper())
        self.logger.propagate = False

        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)
        self.logger.addHandler(stream_handler)

        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                self.log_file, maxBytes=MAX_LOG_SIZE, backupCount=BACKUP_COUNT, encoding="utf-8"
            )
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)
        except OSError as e:
            # stdout logging still works without the file
            self.logger.warning(f"Could not open log file {self.log_file}: {e}")

    def logMessage(self, msg: str) -> None:
        self.logger.info(msg)

    def debug(self, msg: str) -> None:
        self.logger.debug(msg)

    def warning(self, msg: str) -> None:
        self.logger.warning(msg)

    def error(self, msg: str, exc_info: bool = False) -> None:
        self.logger.error(msg, exc_info=exc_info)


_instance: Optional[LoggerSingleton] = None
_lock = threading.Lock()


def getLogger() -> LoggerSingleton:
    global _instance
    if _instance is None:
        with _lock:
            if _instance is None:
                _instance = LoggerSingleton(
                    log_file=os.environ.get("DATA_BACKS_LOG_FILE", str(DEFAULT_LOG_FILE)),
                    level=os.environ.get("LOG_LEVEL", "INFO"),
                )
    return _instance
