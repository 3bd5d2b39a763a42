from __future__ import annotations

from pathlib import Path

from server_log.logger_singleton import getLogger


def test_get_logger_is_singleton():
    assert getLogger() is getLogger()


def test_log_message_reaches_file():
    logger = getLogger()
    logger.logMessage("hello from the logger test")
    for handler in logger.logger.handlers:
        handler.flush()

    assert "hello from the logger test" in Path(logger.log_file).read_text(encoding="utf-8")
