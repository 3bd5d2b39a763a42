from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from config import ServerConfig, load_config


def test_defaults(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    config = load_config({})

    assert config.port == "3000"
    assert config.host == "0.0.0.0"
    assert config.data_dir == (tmp_path / "data").resolve()
    assert config.cors_origins == ["*"]


def test_env_overrides(tmp_path: Path):
    config = load_config(
        {
            "PORT": "8080",
            "DATA_DIR": str(tmp_path / "elsewhere"),
            "CORS_ORIGINS": "https://a.example, https://b.example",
        }
    )

    assert config.port == "8080"
    assert config.data_dir == (tmp_path / "elsewhere").resolve()
    assert config.cors_origins == ["https://a.example", "https://b.example"]


def test_port_is_passed_through_unvalidated():
    assert load_config({"PORT": "not-a-port"}).port == "not-a-port"


def test_empty_port_falls_back_to_default():
    assert load_config({"PORT": ""}).port == "3000"


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("PORT", "4321")
    assert load_config().port == "4321"


def test_config_is_frozen():
    config = ServerConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.port = "1"
