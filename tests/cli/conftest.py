"""Shared fixtures for CLI execution tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture()
def cli_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> dict[str, str]:
    """Point the CLI at a fake device with test credentials and no .env file."""
    monkeypatch.chdir(tmp_path)
    env = {
        "EDGEMAX_ADDRESS": "https://router.local",
        "EDGEMAX_USERNAME": "ubnt",
        "EDGEMAX_PASSWORD": "secret",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env
