# File: cadence/core/config.py
"""
Configuration settings for Cadence.

This module defines application settings using Pydantic's BaseSettings,
which supports environment variable loading and validation.
"""

import json
from typing import Any, Dict, List, Optional, Union

from pydantic import validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    This class uses Pydantic's BaseSettings to load configuration from
    environment variables, with validation and type conversion.
    """

    # API settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Cadence"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS origins from a JSON list or a comma-separated string."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return parsed
            except json.JSONDecodeError:
                return [i.strip() for i in v.split(",") if i.strip()]
        return v or []

    # Database
    DATABASE_PATH: str = "cadence.db"
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: Optional[str] = None
    DATABASE_USER: Optional[str] = None
    DATABASE_PASSWORD: Optional[str] = None
    DATABASE_NAME: Optional[str] = None
    DATABASE_URL: Optional[str] = None

    @validator("DATABASE_URL", pre=True, always=True)
    def assemble_db_connection(cls, v: Optional[str], values: Dict[str, Any]) -> Any:
        """Assemble database connection string."""
        if isinstance(v, str) and v:
            return v
        if (
                values.get("DATABASE_HOST")
                and values.get("DATABASE_PORT")
                and values.get("DATABASE_USER")
                and values.get("DATABASE_NAME")
        ):
            password = values.get("DATABASE_PASSWORD") or ""
            return f"postgresql://{values['DATABASE_USER']}:{password}@{values['DATABASE_HOST']}:{values['DATABASE_PORT']}/{values['DATABASE_NAME']}"
        return f"sqlite:///{values.get('DATABASE_PATH', 'cadence.db')}"

    # ================================
    # Occurrence Calculation
    # ================================

    # Maximum number of yearly matches returned by a range query
    YEARLY_RANGE_MATCH_LIMIT: int = 10

    # Call-site bounds enforced by the HTTP layer, not by the calculator
    MAX_OCCURRENCE_COUNT: int = 1000
    MAX_RANGE_DAYS: int = 3660

    @validator("YEARLY_RANGE_MATCH_LIMIT", "MAX_OCCURRENCE_COUNT", "MAX_RANGE_DAYS")
    def validate_positive(cls, v: int) -> int:
        """Clamp limits to at least one."""
        return max(1, v)

    # ================================
    # Localization Configuration
    # ================================

    # List of supported locales for repetition descriptions
    # Format: ISO 639-1 language codes
    SUPPORTED_LOCALES: List[str] = ["en", "de", "fr", "es"]

    # Default locale for fallback when a locale is missing or unsupported
    DEFAULT_LOCALE: str = "en"

    @validator("SUPPORTED_LOCALES", pre=True)
    def validate_supported_locales(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse and validate supported locales from environment variables."""
        if isinstance(v, str):
            # Try to parse as JSON string first
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return parsed
            except json.JSONDecodeError:
                # Fallback to comma-separated format
                return [i.strip() for i in v.split(",") if i.strip()]
        return v or ["en"]

    @validator("DEFAULT_LOCALE")
    def validate_default_locale(cls, v: str, values: Dict[str, Any]) -> str:
        """Ensure default locale is in supported locales."""
        supported_locales = values.get("SUPPORTED_LOCALES", ["en"])
        if v not in supported_locales:
            return supported_locales[0] if supported_locales else "en"
        return v

    @validator("LOG_LEVEL")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        return v.upper() if v.upper() in valid_levels else "INFO"

    class Config:
        """Pydantic settings configuration."""

        case_sensitive = True
        env_file = ".env"


# Create settings instance
settings = Settings()
