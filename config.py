# config.py

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

DEFAULT_PORT = "3000"
DEFAULT_HOST = "0.0.0.0"


@dataclass(frozen=True)
class ServerConfig:
    """Settings read once at startup and handed to create_app()."""

    port: str = DEFAULT_PORT
    host: str = DEFAULT_HOST
    data_dir: Path = field(default_factory=lambda: Path.cwd() / "data")
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


def _split_origins(raw: str) -> List[str]:
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def load_config(environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """
    Build a ServerConfig from environment variables.
    - PORT is passed through as-is; uvicorn validates it.
    - DATA_DIR is resolved against the current working directory.
    """
    if environ is None:
        environ = os.environ

    data_dir = Path(environ.get("DATA_DIR") or Path.cwd() / "data")
    return ServerConfig(
        port=environ.get("PORT") or DEFAULT_PORT,
        data_dir=data_dir.resolve(),
        cors_origins=_split_origins(environ.get("CORS_ORIGINS", "*")),
    )
