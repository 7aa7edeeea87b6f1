"""
Configuration management for the antiplag services.
All settings loaded from environment variables with validation.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # =============================================================================
    # DATABASE CONFIGURATION
    # =============================================================================
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="antiplag", validation_alias="DB_NAME")
    db_user: str = Field(default="antiplag", validation_alias="DB_USER")
    db_pass: str = Field(default="antiplag", validation_alias="DB_PASS")
    database_url: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")

    # =============================================================================
    # OBJECT STORAGE
    # =============================================================================
    storage_path: str = Field(default="/app/s3_storage", validation_alias="STORAGE_PATH")
    storage_bucket: str = Field(default="tasks", validation_alias="STORAGE_BUCKET")
    public_base_url: str = Field(default="http://localhost:8000", validation_alias="PUBLIC_BASE_URL")

    # =============================================================================
    # ANALYSIS SETTINGS
    # =============================================================================
    plagiarism_threshold: float = Field(default=50.0, validation_alias="PLAGIARISM_THRESHOLD")
    ngram_size: int = Field(default=3, validation_alias="NGRAM_SIZE")
    analysis_service_url: str = Field(default="http://localhost:8000", validation_alias="ANALYSIS_SERVICE_URL")
    analysis_call_timeout: float = Field(default=120.0, validation_alias="ANALYSIS_CALL_TIMEOUT")

    # =============================================================================
    # UPLOAD WATCHER
    # =============================================================================
    watcher_poll_interval: float = Field(default=2.0, validation_alias="WATCHER_POLL_INTERVAL")
    watcher_timeout: float = Field(default=300.0, validation_alias="WATCHER_TIMEOUT")
    watcher_max_attempts: int = Field(default=30, validation_alias="WATCHER_MAX_ATTEMPTS")
    watcher_concurrency: int = Field(default=8, validation_alias="WATCHER_CONCURRENCY")

    # =============================================================================
    # API CONFIGURATION
    # =============================================================================
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    api_host: str = Field(default="0.0.0.0", validation_alias="API_HOST")
    api_port: int = Field(default=8000, validation_alias="API_PORT")
    cors_origins: str = Field(default="http://localhost:3000", validation_alias="CORS_ORIGINS")

    # =============================================================================
    # LOGGING
    # =============================================================================
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # =============================================================================
    # VALIDATORS
    # =============================================================================

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is valid."""
        allowed = {"development", "staging", "production"}
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @field_validator("plagiarism_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        """Ensure threshold is a percentage."""
        if not 0.0 <= v <= 100.0:
            raise ValueError("Threshold must be between 0.0 and 100.0")
        return v

    @field_validator("ngram_size", "watcher_max_attempts", "watcher_concurrency")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v

    @field_validator("watcher_poll_interval", "watcher_timeout", "analysis_call_timeout")
    @classmethod
    def validate_duration(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Duration must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @model_validator(mode="after")
    def validate_production_password(self) -> "Settings":
        """Refuse the development database password in production."""
        if self.environment == "production" and self.database_url is None and len(self.db_pass) < 16:
            raise ValueError("Database password must be at least 16 characters in production")
        return self

    # =============================================================================
    # PROPERTIES
    # =============================================================================

    @property
    def db_sync_url(self) -> str:
        """Database URL, DATABASE_URL wins over the DB_* parts."""
        if self.database_url:
            return self.database_url
        return f"postgresql+psycopg2://{self.db_user}:{self.db_pass}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        return Settings()
    except ValidationError as e:
        print("Configuration Error:")
        print("=" * 60)
        for error in e.errors():
            field = " -> ".join(str(x) for x in error['loc'])
            print(f"  * {field}: {error['msg']}")
        print("=" * 60)
        print("\nPlease check your .env file and ensure all required variables are set.")
        raise SystemExit(1)


settings = get_settings()
