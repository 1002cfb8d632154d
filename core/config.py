"""
Centralized configuration management.
All environment variables and settings are defined here.
"""
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


DEFAULT_EXCLUDED_EXPORT_ACCOUNTS = ["Owner Investment / Drawings", "Cash on Hand"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Application
    app_name: str = Field(default="TXF Converter Service", alias="APP_NAME")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000)
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    
    # Export
    company_name: str = Field(default="NeuralSec Advisory", alias="COMPANY_NAME")
    excluded_export_accounts: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_EXPORT_ACCOUNTS),
        alias="EXCLUDED_EXPORT_ACCOUNTS"
    )
    
    # Uploads and storage
    max_upload_mb: int = Field(default=10, alias="MAX_UPLOAD_MB")
    temp_storage_path: str = Field(default="files", alias="STORAGE_PATH")
    
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v_upper
    
    @field_validator("port")
    @classmethod
    def validate_port(cls, v):
        """Validate port is in valid range."""
        if not (1 <= v <= 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v
    
    @field_validator("company_name")
    @classmethod
    def validate_company_name(cls, v):
        """The company name becomes a single TXF header line."""
        v = v.strip()
        if not v:
            raise ValueError("Company name must not be empty")
        if "\n" in v or "\r" in v:
            raise ValueError("Company name must be a single line")
        return v
    
    @field_validator("max_upload_mb")
    @classmethod
    def validate_upload_size(cls, v):
        """Validate upload size limit."""
        if v < 1:
            raise ValueError("Max upload size must be at least 1 MB")
        if v > 100:
            raise ValueError("Max upload size should not exceed 100 MB")
        return v
    
    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"
    
    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024
        
    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        Path(self.temp_storage_path).mkdir(parents=True, exist_ok=True)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings singleton.
    
    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
