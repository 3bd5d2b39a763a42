# storage.py
"""
Filename derivation and payload persistence for the ingestion route.

Files land at <data_dir>/<name>-<YYYY-MM-DD>-<sanitized address>.json and are
overwritten when the same name, date and address post again.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Union

DATE_FORMAT = "%Y-%m-%d"


class StorageError(Exception):
    """Raised when a payload cannot be written to disk."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Failed to save {path}: {reason}")
        self.path = path
        self.reason = reason


def is_valid_name(name: str) -> bool:
    """Letters, digits, '-' and '_' only."""
    return bool(name) and all(c.isalnum() or c in "-_" for c in name)


def sanitize_address(address: str) -> str:
    # covers both IPv4 dots and IPv6 colons
    return address.replace(".", "_").replace(":", "_")


def format_date(now: datetime) -> str:
    # whole seconds, UTC
    seconds = int(now.timestamp())
    return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime(DATE_FORMAT)


def generate_filename(name: str, address: str, now: datetime) -> str:
    return f"{name}-{format_date(now)}-{sanitize_address(address)}.json"


class PayloadError(StorageError):
    """The payload has no strict JSON / UTF-8 form (NaN, lone surrogates)."""


def serialize_payload(payload: Any) -> bytes:
    # NaN and Infinity are not JSON, and lone surrogates have no UTF-8 encoding
    try:
        return json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise PayloadError(Path("<payload>"), f"not serializable: {e}") from e


def save_payload(data_dir: Union[str, Path], filename: str, data: bytes) -> Path:
    """
    Write already-serialized JSON to data_dir/filename, truncating any
    existing file. Returns the absolute path written.
    """
    dest = Path(data_dir).resolve() / filename

    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with dest.open("wb") as f:
            f.write(data)
    except OSError as e:
        raise StorageError(dest, e.strerror or str(e)) from e

    return dest
