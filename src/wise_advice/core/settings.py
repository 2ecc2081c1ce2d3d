"""Application settings and configuration.

This module defines all configuration options for the Wise Advice application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Wise Advice", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )
    email_confirmation_expire_minutes: int = Field(
        default=60 * 6,
        alias="EMAIL_CONFIRMATION_EXPIRE_MINUTES",
    )
    password_reset_expire_minutes: int = Field(
        default=60,
        alias="PASSWORD_RESET_EXPIRE_MINUTES",
    )

    # Database configuration
    database_url: str = Field(default="sqlite:///./wise_advice.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Listing sizes
    posts_page_size: int = Field(default=3, alias="POSTS_PAGE_SIZE")
    notifications_page_size: int = Field(default=4, alias="NOTIFICATIONS_PAGE_SIZE")

    # Read notifications stay listed for this many days after being read
    notification_read_grace_days: int = Field(default=7, alias="NOTIFICATION_READ_GRACE_DAYS")

    # Outgoing mail
    public_base_url: str = Field(default="http://localhost:8000", alias="PUBLIC_BASE_URL")
    mail_sender: str = Field(default="Wise Advice <noreply@wise-advice.local>", alias="MAIL_SENDER")

    default_avatar: str = Field(default="default-avatar.png", alias="DEFAULT_AVATAR")

    # CORS configuration for web frontend access
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
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()  # type: ignore[call-arg]
