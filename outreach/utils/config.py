# ==============================================================================
# Application Configuration
# ==============================================================================
"""
Configuration management using pydantic-settings.

All configuration is loaded from environment variables, with support for
.env files via python-dotenv.
"""

from functools import lru_cache
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file before any settings are instantiated
load_dotenv()


class SessionSettings(BaseSettings):
    """Session timeout settings.

    The warning window must be strictly shorter than the timeout window;
    anything else is rejected when the settings object is constructed.
    """

    model_config = SettingsConfigDict(env_prefix="SESSION_")

    timeout_minutes: int = Field(default=30, gt=0, description="Session inactivity timeout")
    warning_minutes: int = Field(
        default=5, ge=0, description="Minutes before timeout at which the user is warned"
    )
    activity_throttle_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Minimum interval between handled input signals",
    )

    @model_validator(mode="after")
    def _check_warning_window(self) -> "SessionSettings":
        if self.warning_minutes >= self.timeout_minutes:
            raise ValueError(
                f"warning_minutes ({self.warning_minutes}) must be less than "
                f"timeout_minutes ({self.timeout_minutes})"
            )
        return self

    @property
    def timeout_seconds(self) -> int:
        return self.timeout_minutes * 60

    @property
    def warning_seconds(self) -> int:
        return self.warning_minutes * 60


class ActivitySettings(BaseSettings):
    """User activity monitoring settings."""

    model_config = SettingsConfigDict(env_prefix="ACTIVITY_")

    inactivity_timeout_minutes: int = Field(
        default=60, gt=0, description="Minutes without input before suspicious activity is flagged"
    )
    track_page_views: bool = Field(default=True, description="Record page access events")
    track_user_actions: bool = Field(
        default=True, description="Record user actions and run the inactivity watch"
    )


class AuditSettings(BaseSettings):
    """Audit risk thresholds and failed event handling."""

    model_config = SettingsConfigDict(env_prefix="AUDIT_")

    bulk_high_threshold: int = Field(
        default=100, description="Bulk operations above this many records are high risk"
    )
    export_high_threshold: int = Field(
        default=100, description="Exports above this many records are high risk"
    )
    export_critical_threshold: int = Field(
        default=1000, description="Exports above this many records are critical"
    )
    failed_event_store: Literal["memory", "valkey"] = Field(
        default="memory", description="Where undelivered high/critical events are kept"
    )
    failed_event_limit: int = Field(
        default=10, gt=0, description="Number of undelivered events to keep"
    )


class RateLimitSettings(BaseSettings):
    """UI action rate limiting."""

    model_config = SettingsConfigDict(env_prefix="RATE_LIMIT_")

    max_actions: int = Field(default=10, gt=0, description="Actions allowed per window")
    window_seconds: float = Field(default=60.0, gt=0, description="Sliding window length")


class SecurityLoggerSettings(BaseSettings):
    """Remote security logger endpoint."""

    model_config = SettingsConfigDict(env_prefix="SECURITY_LOGGER_")

    url: Optional[str] = Field(default=None, description="Security logger function URL")
    api_key: Optional[str] = Field(default=None, description="Bearer token for the logger")
    timeout_seconds: float = Field(default=10.0, description="Request timeout in seconds")

    @property
    def is_configured(self) -> bool:
        """Check if the remote logger is configured."""
        return bool(self.url)


class PostgresSettings(BaseSettings):
    """PostgreSQL connection settings for the access log."""

    model_config = SettingsConfigDict(env_prefix="PG_")

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="postgres", description="PostgreSQL username")
    password: str = Field(default="", description="PostgreSQL password")
    database: str = Field(default="outreach", description="Database name")
    schema_name: str = Field(default="public", description="Schema holding log_user_access()")
    sslmode: str = Field(default="prefer", description="SSL mode")

    @property
    def connection_string(self) -> str:
        """Build PostgreSQL connection string."""
        return (
            f"postgresql://{self.user}:{self.password}@"
            f"{self.host}:{self.port}/{self.database}?sslmode={self.sslmode}"
        )


class ValkeySettings(BaseSettings):
    """Valkey (Redis-compatible) connection settings for the failed event store."""

    model_config = SettingsConfigDict(env_prefix="VALKEY_")

    host: str = Field(default="localhost", description="Valkey host")
    port: int = Field(default=6379, description="Valkey port")
    password: Optional[str] = Field(default=None, description="Valkey password")
    db: int = Field(default=0, description="Valkey database number")
    ssl: bool = Field(default=False, description="Use SSL/TLS connection")

    @property
    def url(self) -> str:
        """Build Valkey connection URL."""
        scheme = "rediss" if self.ssl else "redis"
        if self.password:
            return f"{scheme}://:{self.password}@{self.host}:{self.port}/{self.db}"
        return f"{scheme}://{self.host}:{self.port}/{self.db}"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    # Nested settings
    session: SessionSettings = Field(default_factory=SessionSettings)
    activity: ActivitySettings = Field(default_factory=ActivitySettings)
    audit: AuditSettings = Field(default_factory=AuditSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    security_logger: SecurityLoggerSettings = Field(default_factory=SecurityLoggerSettings)
    postgres: PostgresSettings = Field(default_factory=PostgresSettings)
    valkey: ValkeySettings = Field(default_factory=ValkeySettings)

    # General settings
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for subsequent calls.
    """
    return Settings()
