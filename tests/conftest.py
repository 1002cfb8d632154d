"""
Pytest configuration for test isolation.

Settings are a process-wide singleton read from the environment. Each test
gets a fresh instance, a clean environment for the variables the converter
reads, and its own storage directory.
"""
import os
from pathlib import Path

import pytest

from core.config import reset_settings

SETTINGS_ENV_VARS = [
    "APP_NAME",
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "COMPANY_NAME",
    "EXCLUDED_EXPORT_ACCOUNTS",
    "MAX_UPLOAD_MB",
    "STORAGE_PATH",
]


@pytest.fixture(autouse=True)
def _isolate_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Reset the settings singleton around every test."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STORAGE_PATH", os.fspath(tmp_path / "files"))
    reset_settings()
    yield
    reset_settings()
