"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (e.g. SECRET_KEY, ENCRYPTION_SALT) are
validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_required (secret_key, encryption_salt) and the SMTP block
    when smtp_host is set.
    """

    # App
    app_name: str = "duet"
    app_version: str = "1.0.0"
    debug: bool = False
    # Base URL of the web client; links in emails point here.
    frontend_url: str = "http://localhost:3000"

    # Database (SQLAlchemy async URL, e.g. postgresql+asyncpg://... or sqlite+aiosqlite:///...)
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Security
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours
    encryption_salt: SecretStr = SecretStr("")
    # Key source for password-share payloads; secret_key is used when unset.
    password_share_secret: SecretStr | None = None

    # Consent protocol lifetimes
    one_time_code_length: int = 6
    password_reset_code_expire_minutes: int = 10
    password_reset_link_expire_minutes: int = 60
    deletion_code_expire_minutes: int = 30
    password_share_expire_minutes: int = 60
    email_verification_expire_hours: int = 24

    # Email delivery: when smtp_host is empty, emails are logged instead of sent.
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: SecretStr | None = None
    smtp_use_tls: bool = True
    smtp_timeout_seconds: int = 10
    mail_from_address: str = "no-reply@localhost"
    mail_from_name: str = "Duet"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required secrets and clamp protocol lifetimes.

        - SECRET_KEY and ENCRYPTION_SALT are always required.
        - Reset codes live at least 1 minute; reset links at least 5 minutes.
        """
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if not self.encryption_salt.get_secret_value():
            raise ValueError(
                "ENCRYPTION_SALT is required. Generate with: openssl rand -hex 16."
            )
        if not 4 <= self.one_time_code_length <= 10:
            raise ValueError(
                f"one_time_code_length must be between 4 and 10, got: {self.one_time_code_length}"
            )
        self.password_reset_code_expire_minutes = max(
            1, self.password_reset_code_expire_minutes
        )
        self.password_reset_link_expire_minutes = max(
            5, self.password_reset_link_expire_minutes
        )
        if self.smtp_host and not self.mail_from_address:
            raise ValueError("MAIL_FROM_ADDRESS is required when SMTP_HOST is set.")
        return self

    @property
    def share_secret(self) -> str:
        """Secret material for password-share encryption (dedicated secret or SECRET_KEY)."""
        if self.password_share_secret and self.password_share_secret.get_secret_value():
            return self.password_share_secret.get_secret_value()
        return self.secret_key.get_secret_value()


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
