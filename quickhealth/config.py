"""Application configuration."""

from functools import lru_cache

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SESSION_SECRET = "change-me-in-production"
DEFAULT_FRONTEND_URLS = "http://localhost:5173,http://localhost:5174,http://localhost:5175"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="QuickHealth API", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
    )
    debug: bool = Field(default=False, alias="DEBUG")
    api_prefix: str = Field(default="/api", alias="API_PREFIX")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8080, alias="PORT")
    reload: bool = Field(default=False, alias="RELOAD")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./quickhealth.db",
        alias="DATABASE_URL",
    )

    # Sessions
    session_secret: str = Field(
        default=DEFAULT_SESSION_SECRET,
        alias="SESSION_SECRET",
        description="Key used to sign session cookies",
    )
    # Milliseconds, 24 hours by default
    session_max_age: int = Field(default=86_400_000, alias="SESSION_MAX_AGE")
    session_cookie_name: str = Field(default="connect.sid", alias="SESSION_COOKIE_NAME")
    session_backend: str = Field(
        default="redis",
        alias="SESSION_BACKEND",
        description="Session store backend: 'redis' or 'memory'",
    )

    # Redis
    redis_host: str = Field(default="localhost", alias="REDIS_HOST")
    redis_port: int = Field(default=6379, alias="REDIS_PORT")
    redis_username: str = Field(default="default", alias="REDIS_USERNAME")
    redis_password: str = Field(default="", alias="REDIS_PASSWORD")
    redis_decode_responses: bool = Field(default=True, alias="REDIS_DECODE_RESPONSES")

    # CORS
    cors_origins_str: str = Field(
        default="",
        validation_alias=AliasChoices("FRONTEND_URLS", "FRONTEND_URL"),
    )

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins as a list, falling back to the local dev servers."""
        origins = [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]
        if not origins:
            return DEFAULT_FRONTEND_URLS.split(",")
        return origins

    @property
    def session_max_age_seconds(self) -> int:
        """Session lifetime in whole seconds, as used by cookies and the store TTL."""
        return max(self.session_max_age // 1000, 1)

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def async_database_url(self) -> str:
        """Database URL with an async driver selected."""
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
        if self.database_url.startswith("sqlite:///"):
            return self.database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return self.database_url

    @model_validator(mode="after")
    def require_session_secret_in_production(self) -> "Settings":
        """Refuse to sign production cookies with the built-in secret."""
        if self.is_production and self.session_secret == DEFAULT_SESSION_SECRET:
            raise ValueError("SESSION_SECRET must be set in production")
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
