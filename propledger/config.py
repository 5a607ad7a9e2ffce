"""
PropLedger - Configuration Settings

This module handles all application configuration using Pydantic Settings.
Environment variables are loaded from .env file.
"""

from decimal import Decimal
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # ===========================================
    # APPLICATION CONFIGURATION
    # ===========================================
    app_name: str = "PropLedger"
    app_env: str = "development"
    debug: bool = False
    
    # ===========================================
    # DATABASE CONFIGURATION
    # ===========================================
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "propledger"
    database_url_async: str = ""
    
    @property
    def async_database_url(self) -> str:
        """Async SQLAlchemy URL, assembled from the postgres_* parts when not set explicitly."""
        if self.database_url_async:
            return self.database_url_async
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )
    
    # ===========================================
    # REPORT WINDOWS
    # ===========================================
    rent_roll_history_months: int = 2  # Arrears context before the target month
    overdue_lookback_months: int = 6
    overdue_default_days: int = 30
    active_tenant_payment_days: int = 120  # Last payment newer than this => active
    worst_offenders_count: int = 10
    
    # ===========================================
    # LEASE INFERENCE
    # Lease start is the first recorded payment; see rent_reports_service.
    # ===========================================
    lease_term_months: int = 12
    lease_notice_days: int = 30
    lease_expiry_default_range_days: int = 60
    annual_rent_uplift_pct: Decimal = Decimal("3.0")
    
    # ===========================================
    # CORS SETTINGS
    # ===========================================
    cors_origins: str = "http://localhost:3000,http://localhost:8000,http://127.0.0.1:8000"
    
    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]
    
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to avoid reading .env file on every call.
    """
    return Settings()


# Export settings instance
settings = get_settings()
