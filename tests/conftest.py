"""Ensure the project root is importable and logs stay out of the repo."""

from __future__ import annotations

import os
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

os.environ.setdefault("DATA_BACKS_LOG_FILE", str(Path(tempfile.gettempdir()) / "data_backs_test.log"))

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from config import ServerConfig  # noqa: E402
from data_server import create_app  # noqa: E402
from routes.data_api import get_client_address  # noqa: E402


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc))


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture()
def app(data_dir: Path, clock: FakeClock):
    app = create_app(ServerConfig(port="3000", data_dir=data_dir), clock=clock)
    app.dependency_overrides[get_client_address] = lambda: "203.0.113.5"
    return app


@pytest.fixture()
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def server_logs(caplog):
    """Capture the data_backs logger, which does not propagate to root."""
    from server_log.logger_singleton import getLogger

    logger = getLogger().logger
    logger.addHandler(caplog.handler)
    try:
        yield caplog
    finally:
        logger.removeHandler(caplog.handler)
