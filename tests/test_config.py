"""
Unit tests for configuration module.
"""
import pytest
from pydantic import ValidationError

from core.config import Settings, get_settings, reset_settings


def test_settings_defaults():
    """Test default configuration values."""
    settings = get_settings()
    assert settings.app_name == "TXF Converter Service"
    assert settings.host == "0.0.0.0"
    assert settings.port == 8000
    assert settings.log_level == "INFO"
    assert settings.company_name == "NeuralSec Advisory"
    assert settings.excluded_export_accounts == ["Owner Investment / Drawings", "Cash on Hand"]
    assert settings.max_upload_mb == 10
    assert settings.max_upload_bytes == 10 * 1024 * 1024


def test_settings_from_environment(monkeypatch):
    """Test values are read from environment variables."""
    monkeypatch.setenv("COMPANY_NAME", "Acme LLC")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("EXCLUDED_EXPORT_ACCOUNTS", '["Cash on Hand"]')
    
    settings = get_settings()
    assert settings.company_name == "Acme LLC"
    assert settings.log_level == "DEBUG"
    assert settings.excluded_export_accounts == ["Cash on Hand"]


def test_settings_validation_port(monkeypatch):
    """Test port validation."""
    monkeypatch.setenv("PORT", "99999")
    
    with pytest.raises(ValidationError):
        get_settings()


def test_settings_validation_log_level(monkeypatch):
    """Test log level validation."""
    monkeypatch.setenv("LOG_LEVEL", "INVALID")
    
    with pytest.raises(ValidationError):
        get_settings()


def test_settings_validation_company_name():
    """Company name must fit on one TXF header line."""
    with pytest.raises(ValidationError):
        Settings(company_name="Acme\nLLC")
    with pytest.raises(ValidationError):
        Settings(company_name="   ")


def test_settings_validation_upload_size(monkeypatch):
    """Test upload size validation."""
    monkeypatch.setenv("MAX_UPLOAD_MB", "0")
    
    with pytest.raises(ValidationError):
        get_settings()


def test_settings_singleton():
    """Test settings singleton behavior."""
    settings1 = get_settings()
    settings2 = get_settings()
    assert settings1 is settings2
    
    reset_settings()
    assert get_settings() is not settings1


def test_ensure_directories(tmp_path):
    """Storage directory is created on demand."""
    target = tmp_path / "exports" / "txf"
    settings = Settings(temp_storage_path=str(target))
    settings.ensure_directories()
    assert target.is_dir()
