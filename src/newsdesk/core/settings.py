"""Application settings and configuration.

This module defines all configuration options for the Newsdesk application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Newsdesk", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication (tokens are issued by the login service)
    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")

    # Database configuration
    database_url: str = Field(default="sqlite:///./newsdesk.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    db_command_timeout_seconds: float = Field(
        default=30.0,
        alias="DB_COMMAND_TIMEOUT_SECONDS",
    )

    # Comment moderation settings
    keyword_cache_seconds: float = Field(default=300.0, alias="KEYWORD_CACHE_SECONDS")
    auto_hide_report_threshold: int = Field(default=3, alias="AUTO_HIDE_REPORT_THRESHOLD")
    # When the keyword store is unreachable, moderate with an empty rule set
    # instead of failing the submission.
    keyword_store_fail_open: bool = Field(default=True, alias="KEYWORD_STORE_FAIL_OPEN")
    # Optional Redis used to broadcast keyword cache invalidations across workers.
    keyword_cache_redis_url: str | None = Field(default=None, alias="KEYWORD_CACHE_REDIS_URL")
    keyword_cache_redis_key: str = Field(
        default="newsdesk:keywords:generation",
        alias="KEYWORD_CACHE_REDIS_KEY",
    )

    # Comment validation limits
    comment_min_length: int = Field(default=2, alias="COMMENT_MIN_LENGTH")
    comment_max_length: int = Field(default=2000, alias="COMMENT_MAX_LENGTH")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
