"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal
from urllib.parse import quote_plus

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
)

# Session tokens are always HS256; the algorithm is deliberately not an env option.
JWT_ALGORITHM = "HS256"


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["development", "production", "test"] = "development"
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # HTTP server (used by `python -m app`)
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8080
    SERVER_READ_TIMEOUT_SEC: int = 30
    SERVER_WRITE_TIMEOUT_SEC: int = 30
    SERVER_SHUTDOWN_GRACE_SEC: int = 30

    # Postgres: DATABASE_URL wins; otherwise the URL is assembled from the DB_* parts.
    DATABASE_URL: str | None = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: SecretStr = SecretStr("password")
    DB_NAME: str = "project_management"
    DB_SSL_MODE: str = "disable"
    DB_MAX_CONNS: int = 25
    DB_MIN_CONNS: int = 5
    DB_POOL_TIMEOUT_SEC: float = 10.0
    DB_CONNECT_TIMEOUT_SEC: int = 10
    # Server-side deadline applied to every statement on pooled connections.
    DB_STATEMENT_TIMEOUT_MS: int = 15_000
    HEALTH_CHECK_TIMEOUT_SEC: float = 5.0

    # Session tokens (JWT) and API tokens
    JWT_SECRET: SecretStr = SecretStr("your-secret-key-change-in-production")
    SESSION_DURATION_HOURS: int = 24
    TOKEN_DURATION_HOURS: int = 4
    TOKEN_MAX_DURATION_HOURS: int = 24
    # Reserved: there is no refresh-token protocol; kept so deployments can set it.
    REFRESH_DURATION_HOURS: int = 168

    # Telemetry (recognized; no exporter is wired into this service)
    OTEL_ENDPOINT: str = "http://localhost:4318/v1/traces"
    OTEL_ENABLED: bool = False

    LOG_LEVEL: str = "info"
    LOG_FORMAT: Literal["text", "json"] = "text"

    # CORS: comma-separated lists
    CORS_ALLOWED_ORIGINS: str = "*"
    CORS_ALLOWED_METHODS: str = "GET,POST,PUT,DELETE,OPTIONS"
    CORS_ALLOWED_HEADERS: str = "Origin,Content-Type,Accept,Authorization"

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_REQUESTS_PER_MINUTE: int = 100
    RATE_LIMIT_BURST: int = 10

    @field_validator("APP_ENV", mode="before")
    @classmethod
    def normalize_app_env(cls, v: str) -> str:
        aliases = {"dev": "development", "prod": "production"}
        s = str(v).strip().lower()
        return aliases.get(s, s)

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL URL (e.g. postgresql:// or postgresql+psycopg2://)"
            )
        return v.strip()

    @field_validator("SERVER_PORT", "DB_PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("SERVER_READ_TIMEOUT_SEC", "SERVER_WRITE_TIMEOUT_SEC", "SERVER_SHUTDOWN_GRACE_SEC")
    @classmethod
    def validate_server_timeouts(cls, v: int) -> int:
        if v < 1 or v > 600:
            raise ValueError("server timeouts must be between 1 and 600 seconds")
        return v

    @field_validator("DB_MAX_CONNS", "DB_MIN_CONNS")
    @classmethod
    def validate_pool_size(cls, v: int) -> int:
        if v < 1 or v > 1000:
            raise ValueError("DB pool sizes must be between 1 and 1000")
        return v

    @field_validator("DB_STATEMENT_TIMEOUT_MS")
    @classmethod
    def validate_statement_timeout(cls, v: int) -> int:
        if v < 100 or v > 600_000:
            raise ValueError(
                "DB_STATEMENT_TIMEOUT_MS must be between 100 and 600000 (0.1s to 10 min)"
            )
        return v

    @field_validator("HEALTH_CHECK_TIMEOUT_SEC", "DB_POOL_TIMEOUT_SEC")
    @classmethod
    def validate_short_timeout(cls, v: float) -> float:
        if v <= 0 or v > 60:
            raise ValueError("timeout must be greater than 0 and at most 60 seconds")
        return v

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("SESSION_DURATION_HOURS", "REFRESH_DURATION_HOURS")
    @classmethod
    def validate_session_hours(cls, v: int) -> int:
        if v < 1 or v > 720:
            raise ValueError("session durations must be between 1 and 720 hours (30 days)")
        return v

    @field_validator("TOKEN_DURATION_HOURS", "TOKEN_MAX_DURATION_HOURS")
    @classmethod
    def validate_token_hours(cls, v: int) -> int:
        if v < 1 or v > 8760:
            raise ValueError("API token durations must be between 1 and 8760 hours (1 year)")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        s = v.strip().upper()
        if s not in {"DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL"}:
            raise ValueError("LOG_LEVEL must be one of debug, info, warning, error, critical")
        return "WARNING" if s == "WARN" else s

    @field_validator("RATE_LIMIT_REQUESTS_PER_MINUTE", "RATE_LIMIT_BURST")
    @classmethod
    def validate_rate_limit(cls, v: int) -> int:
        if v < 1 or v > 100_000:
            raise ValueError("rate limit values must be between 1 and 100000")
        return v

    @property
    def database_url(self) -> str:
        """Effective SQLAlchemy URL: DATABASE_URL, or one built from the DB_* parts."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        password = quote_plus(self.DB_PASSWORD.get_secret_value())
        return (
            f"postgresql+psycopg2://{quote_plus(self.DB_USER)}:{password}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?sslmode={self.DB_SSL_MODE}"
        )

    @property
    def cors_origins(self) -> list[str]:
        return _split_csv(self.CORS_ALLOWED_ORIGINS)

    @property
    def cors_methods(self) -> list[str]:
        return _split_csv(self.CORS_ALLOWED_METHODS)

    @property
    def cors_headers(self) -> list[str]:
        return _split_csv(self.CORS_ALLOWED_HEADERS)

    @property
    def api_token_max_hours(self) -> int:
        """Upper bound for API token lifetime; never below the default lifetime."""
        return max(self.TOKEN_MAX_DURATION_HOURS, self.TOKEN_DURATION_HOURS)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
