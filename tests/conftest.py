"""Pytest fixtures for notation-tools tests."""

import json
from pathlib import Path

import pytest

from notation_tools.config import clear_config_cache


@pytest.fixture(autouse=True)
def user_config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the user config at a temp location and reset the process-wide cache."""
    config_path = tmp_path / "notation" / "config.json"
    monkeypatch.setattr("notation_tools.config.USER_CONFIG_PATH", config_path)
    clear_config_cache()
    yield config_path
    clear_config_cache()


@pytest.fixture
def write_user_config(user_config_path: Path):
    """Write a JSON document to the user config file."""

    def _write(data) -> Path:
        user_config_path.parent.mkdir(parents=True, exist_ok=True)
        user_config_path.write_text(json.dumps(data))
        return user_config_path

    return _write
