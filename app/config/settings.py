"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Redis (for Dramatiq and distributed locks)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"

    # Manifest Financial (payout processor)
    manifest_api_key: str | None = None
    manifest_base_url: str = "https://api.manifest.fin/v1"

    # Payout settlement
    payout_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-scout timeout for the external payout call (seconds)"
    )
    payout_lock_timeout: int = Field(
        default=120,
        gt=0,
        description="Per-scout settlement lock TTL (seconds)"
    )
    emergency_stop_payouts: bool = Field(
        default=False,
        description="Emergency stop for all scout payouts"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production':
            if self.debug:
                raise ValueError(
                    'DEBUG must be False in production environment. '
                    'Set DEBUG=false in your .env file.'
                )

            if self.database_url.startswith('sqlite'):
                raise ValueError(
                    'SQLite is not supported in production. '
                    'Set DATABASE_URL to a postgresql+asyncpg:// URL.'
                )

            if not self.manifest_api_key:
                logger.warning(
                    'MANIFEST_API_KEY is not set. Scout payouts will be '
                    'credited to the internal ledger only.'
                )

        return self

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith((
            'postgresql://',
            'postgresql+asyncpg://',
            'sqlite+aiosqlite://',
        )):
            raise ValueError(
                'DATABASE_URL must start with postgresql://, '
                'postgresql+asyncpg:// or sqlite+aiosqlite://'
            )
        if v.startswith('postgresql://'):
            # Async engine needs the asyncpg driver
            v = v.replace('postgresql://', 'postgresql+asyncpg://', 1)
        return v

    @field_validator('manifest_base_url')
    @classmethod
    def validate_manifest_base_url(cls, v: str) -> str:
        """Strip trailing slash from Manifest base URL."""
        return v.rstrip('/')

    @property
    def manifest_configured(self) -> bool:
        """Whether payouts go through Manifest Financial."""
        return bool(self.manifest_api_key)


# Global settings instance
settings = Settings()
