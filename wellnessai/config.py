"""
Configuration Management for the WellnessAI Service

Environment-based configuration using Pydantic Settings.
"""
from typing import Optional, List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra fields from .env file
    )

    # Application
    app_name: str = "WellnessAI Risk Assessment API"
    app_version: str = "0.1.0"
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    api_prefix: str = "/api/v1"
    cors_origins: List[str] = ["*"]

    # LLM Configuration
    gemini_api_key: Optional[str] = Field(default=None, description="Google Gemini API key")
    gemini_model: str = "gemini-2.5-flash"
    chat_temperature: float = 0.7
    chat_top_k: int = 40
    chat_top_p: float = 0.95
    chat_max_output_tokens: int = 500
    pdf_max_output_tokens: int = 2048
    request_timeout_seconds: int = 30

    # Reports
    max_stored_reports: int = Field(default=500, description="Generated reports kept for download")

    # Uploads
    max_upload_mb: int = Field(default=10, description="Maximum accepted PDF upload size")

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
