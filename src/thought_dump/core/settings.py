"""Runtime configuration for the Thought Dump API.

Every option is read from the environment (or a ``.env`` file) under the
upper-case name given as its alias.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Built-in voter hashing secret; deployments are expected to override it.
DEFAULT_HASH_SECRET = "default-secret"


class Settings(BaseSettings):
    """Environment-backed settings for the API process, the seeder and Alembic."""

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    app_name: str = Field(default="Thought Dump API", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    # Also switches on ``details`` in error bodies.
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Admin login and session tokens
    secret_key: str = Field(alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    admin_token_expire_minutes: int = Field(default=12 * 60, alias="ADMIN_TOKEN_EXPIRE_MINUTES")
    admin_secret: str | None = Field(default=None, alias="ADMIN_SECRET")

    # Voter identity
    hash_secret: str = Field(default=DEFAULT_HASH_SECRET, alias="HASH_SECRET")
    trust_forwarded_for: bool = Field(default=False, alias="TRUST_FORWARDED_FOR")

    # Storage
    database_url: str = Field(default="sqlite:///./thought_dump.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Per-address request limit, 100 requests per 15 minutes by default
    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")
    rate_limit_window_ms: int = Field(default=15 * 60 * 1000, ge=1, alias="RATE_LIMIT_WINDOW_MS")
    rate_limit_max_requests: int = Field(default=100, ge=1, alias="RATE_LIMIT_MAX_REQUESTS")

    # List endpoints
    default_page_size: int = Field(default=20, ge=1, alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=100, ge=1, alias="MAX_PAGE_SIZE")

    # Browser clients
    cors_origins: list[str] = Field(default=["http://localhost:5173"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    @property
    def effective_database_url(self) -> str:
        """``TEST_DATABASE_URL`` when ``USE_TEST_DATABASE`` is on, else ``DATABASE_URL``."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def database_url_sync(self) -> str:
        """The effective URL with async Postgres drivers swapped for psycopg.

        Alembic and the seeder always run synchronously.
        """
        url = self.effective_database_url
        for async_scheme in ("postgresql+asyncpg", "postgresql+aiopg"):
            if url.startswith(async_scheme):
                return "postgresql+psycopg" + url[len(async_scheme):]
        return url

    @property
    def uses_default_hash_secret(self) -> bool:
        return self.hash_secret == DEFAULT_HASH_SECRET


settings = Settings()  # type: ignore[call-arg]
