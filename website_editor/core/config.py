"""Settings for the website editor API, read from the environment or ``.env``."""

from enum import Enum
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class ConfigurationError(Exception):
    """Configuration is unsafe for the selected environment."""


_DEFAULT_JWT_SECRET = "dev-insecure-key-change-me"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Every tunable of the service. Env var names are the field names, any case."""

    environment: Environment = Field(default=Environment.DEVELOPMENT)

    # Comma-separated list; "*" is refused by get_cors_origins.
    cors_allowed_origins: str = Field(default="http://localhost:3000")

    # --- Storage ---
    database_url: str = Field(
        default="sqlite:///./website_editor.db",
        description="SQLAlchemy URL (sqlite:/// or postgresql://)",
    )
    # Pool settings apply to PostgreSQL only.
    db_pool_size: int = Field(default=5)
    db_max_overflow: int = Field(default=10)
    db_pool_timeout: int = Field(default=30, description="Seconds to wait for a pooled connection")
    db_pool_recycle: int = Field(default=1800, description="Connection lifetime in seconds")
    db_statement_timeout_ms: int = Field(
        default=15000,
        description="Per-statement limit on PostgreSQL; 0 leaves the server default",
    )

    # --- Auth ---
    jwt_secret_key: str = Field(default=_DEFAULT_JWT_SECRET, description="Shared HS256 secret")
    jwt_algorithm: str = Field(default="HS256")
    auth_enabled: bool = Field(
        default=False,
        description="When false, every request acts as dev_user_id",
    )
    dev_user_id: str = Field(default="dev-user")

    rate_limit_per_minute: int = Field(default=120, description="Per client; 0 disables limiting")

    # --- Feeds and revisions ---
    feed_default_limit: int = Field(default=20)
    feed_max_limit: int = Field(default=100)
    home_feed_size: int = Field(default=11)
    revision_allocation_attempts: int = Field(
        default=3,
        description="sub_id allocations tried before answering 409",
    )

    # --- Logging ---
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json", description="'json' or 'text'")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator("feed_default_limit", "feed_max_limit", "home_feed_size", "revision_allocation_attempts")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Must be at least 1")
        return v

    def get_cors_origins(self) -> List[str]:
        """Parsed CORS origins. Raises ValueError on a wildcard."""
        origins = [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]
        if "*" in origins:
            raise ValueError("CORS_ALLOWED_ORIGINS must list explicit origins, not '*'")
        return origins

    def uses_default_secret(self) -> bool:
        return self.jwt_secret_key == _DEFAULT_JWT_SECRET

    def validate_production_config(self) -> None:
        """Refuse insecure settings in production; no-op in development.

        Raises:
            ConfigurationError: listing every problem found.
        """
        if self.environment != Environment.PRODUCTION:
            return

        problems: List[str] = []
        if self.uses_default_secret():
            problems.append("JWT_SECRET_KEY is the built-in default (generate one: openssl rand -hex 32)")
        if not self.auth_enabled:
            problems.append("AUTH_ENABLED is false")
        local = [o for o in self.get_cors_origins() if "localhost" in o or "127.0.0.1" in o]
        if local:
            problems.append(f"CORS_ALLOWED_ORIGINS contains local origins: {local}")

        if problems:
            raise ConfigurationError(
                "Refusing to start in production:\n  - " + "\n  - ".join(problems)
            )


settings = Settings()
