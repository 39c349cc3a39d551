"""Runtime configuration for Pulse Stage.

Every option is read from an environment variable (or ``.env``) named by the
field alias; only ``SECRET_KEY`` has no default.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed view of the process environment."""

    # Application metadata
    app_name: str = Field(default="Pulse Stage", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./pulse.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # System account credited with the balance spent on downvotes
    admin_account_id: int | None = Field(default=None, alias="ADMIN_ACCOUNT_ID")

    # Link preview metadata extraction (iframely-compatible API)
    metadata_api_url: str = Field(
        default="https://cdn.iframe.ly/api/iframely",
        alias="METADATA_API_URL",
    )
    iframely_key: str | None = Field(default=None, alias="IFRAMELY_KEY")
    metadata_http_timeout_seconds: float = Field(
        default=10.0,
        alias="METADATA_HTTP_TIMEOUT_SECONDS",
    )

    # Reputation decay schedule and formula
    reputation_decay_enabled: bool = Field(default=True, alias="REPUTATION_DECAY_ENABLED")
    reputation_decay_interval_seconds: float = Field(
        default=600.0,
        alias="REPUTATION_DECAY_INTERVAL_SECONDS",
    )
    reputation_decay_factor: float = Field(default=0.98, alias="REPUTATION_DECAY_FACTOR")
    reputation_vote_weight_factor: float = Field(
        default=0.9,
        alias="REPUTATION_VOTE_WEIGHT_FACTOR",
    )
    reputation_floor: float = Field(default=0.1, alias="REPUTATION_FLOOR")
    initial_post_reputation: float = Field(default=1.0, alias="INITIAL_POST_REPUTATION")

    # Real-time broadcast fan-out
    broadcast_queue_size: int = Field(default=100, alias="BROADCAST_QUEUE_SIZE")

    # Browser clients
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
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
        """Return the active URL with PostgreSQL pinned to the psycopg driver.

        Plain ``postgres://`` and ``postgresql://`` URLs (as issued by most
        hosting providers) are rewritten so SQLAlchemy and Alembic pick psycopg 3.
        """
        url = self.effective_database_url
        for prefix in ("postgres://", "postgresql://", "postgresql+asyncpg://"):
            if url.startswith(prefix):
                return "postgresql+psycopg://" + url[len(prefix):]
        return url

    @property
    def effective_database_url(self) -> str:
        """Return ``TEST_DATABASE_URL`` when test mode is on, else ``DATABASE_URL``."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()  # type: ignore[call-arg]
