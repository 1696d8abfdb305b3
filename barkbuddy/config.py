"""
Configuration management for BarkBuddy.
Loads settings from environment variables and provides typed configuration access.
"""

import sys
from typing import Optional
from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Google Cloud Platform
    gcp_project_id: str = Field(default="barkbuddy", description="GCP / Firebase project ID")
    gcp_credentials_path: Optional[str] = Field(default=None, description="Path to GCP credentials JSON")

    # Firestore
    firestore_collection_owners: str = Field(
        default="owners",
        description="Firestore collection holding dog owner profiles"
    )
    firestore_collection_walkers: str = Field(
        default="walkers",
        description="Firestore collection holding dog walker profiles"
    )

    # Profile images
    image_fetch_timeout: int = Field(default=15, description="Profile image download timeout in seconds")
    image_max_bytes: int = Field(
        default=5 * 1024 * 1024,
        description="Largest profile image accepted for display"
    )

    # Profile editing
    profile_optimistic_concurrency: bool = Field(
        default=False,
        description="Reject saves when the profile document changed since it was loaded"
    )

    # Testing
    mock_apis: bool = Field(default=False, description="Use the in-memory profile store")


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings


def configure_logging(level: Optional[str] = None) -> None:
    """Route loguru output to stderr at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=(level or get_settings().log_level).upper())


# Convenience access
settings = get_settings()
