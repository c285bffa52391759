"""
Configuration management for Bookwhen Watch.

Loads and validates all environment variables with clear error messages.
Uses Pydantic Settings for type safety and validation.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Credentials are only required for the backends that are selected,
    e.g. EMAIL_USER/EMAIL_PASS when NOTIFIER=email. A missing credential
    fails fast with a message naming the variables to set.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Calendar source
    calendar_url: str = Field(
        default="https://bookwhen.com/kclmt",
        description="Bookwhen agenda page to watch"
    )
    request_timeout: float = Field(
        default=15.0,
        gt=0,
        description="Timeout in seconds for fetching the calendar page"
    )

    # Snapshot persistence
    snapshot_backend: Literal["file", "supabase"] = Field(
        default="file",
        description="Where the previous run's events are kept"
    )
    snapshot_path: Path = Field(
        default=Path("./snapshot.json"),
        description="Snapshot file used by the file backend"
    )
    snapshot_key: str = Field(
        default="default",
        description="Row key used by the supabase backend"
    )
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL"
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (not anon key)"
    )

    # Notification
    notifier: Literal["email", "telegram", "log"] = Field(
        default="email",
        description="Channel used to report changes"
    )
    email_user: Optional[str] = Field(
        default=None,
        description="SMTP login, also used as the sender address"
    )
    email_pass: Optional[str] = Field(
        default=None,
        description="SMTP password (a Gmail app password, not the account password)"
    )
    email_to: Optional[str] = Field(
        default=None,
        description="Recipient address. Defaults to EMAIL_USER."
    )
    email_subject: str = Field(
        default="Bookwhen Class Update",
        description="Subject line for change emails"
    )
    smtp_host: str = Field(default="smtp.gmail.com")
    smtp_port: int = Field(default=465)
    telegram_bot_token: Optional[str] = Field(
        default=None,
        description="Telegram Bot API token (from @BotFather)"
    )
    telegram_chat_id: Optional[str] = Field(
        default=None,
        description="Telegram chat ID (user, group, or channel)"
    )

    # Behaviour
    abort_on_corrupt_snapshot: bool = Field(
        default=False,
        description="Abort instead of starting from an empty baseline when the snapshot is unreadable"
    )
    notify_on_error: bool = Field(
        default=False,
        description="Send a short error report through the notifier when a run fails"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("calendar_url")
    @classmethod
    def validate_calendar_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("Calendar URL must start with http:// or https://")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return upper

    @model_validator(mode="after")
    def validate_backend_credentials(self) -> "Settings":
        """Check that the selected backends have their credentials."""
        required = []
        if self.snapshot_backend == "supabase":
            required += ["supabase_url", "supabase_service_role_key"]
        if self.notifier == "email":
            required += ["email_user", "email_pass"]
        elif self.notifier == "telegram":
            required += ["telegram_bot_token", "telegram_chat_id"]

        missing = [name.upper() for name in required if not getattr(self, name)]
        if missing:
            raise ValueError(f"Missing required settings: {', '.join(missing)}")
        return self

    @property
    def email_recipient(self) -> Optional[str]:
        """Address change emails are sent to (yourself by default)."""
        return self.email_to or self.email_user


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Validated application settings

    Raises:
        ValidationError: If environment variables are missing or invalid
    """
    return Settings()


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Configure application logging.

    Args:
        settings: Optional settings instance, will be loaded if not provided

    Returns:
        logging.Logger: Configured logger instance
    """
    level = settings.log_level if settings is not None else "INFO"

    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logging.getLogger("bookwhen_watch")
