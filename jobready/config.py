"""SMTP configuration for the mail dispatcher.

Settings are read from the environment (or a ``.env`` file) once, when the
submission service starts, and handed to the MailDispatcher explicitly.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

REQUIRED_SETTINGS = ("smtp_host", "smtp_user", "smtp_pass", "smtp_from", "admin_email")


class MailSettings(BaseSettings):
    """SMTP relay and recipient settings.

    Environment variables: SMTP_HOST, SMTP_PORT, SMTP_SECURE, SMTP_USER,
    SMTP_PASS, SMTP_FROM, ADMIN_EMAIL.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    smtp_host: Optional[str] = None
    smtp_port: int = 587
    # Implicit TLS (SMTPS); otherwise STARTTLS is attempted when offered.
    smtp_secure: bool = False
    smtp_user: Optional[str] = None
    smtp_pass: Optional[str] = None
    smtp_from: Optional[str] = None
    admin_email: Optional[str] = None

    smtp_timeout: float = 30.0

    def missing_settings(self) -> List[str]:
        """Environment names of required settings that are unset or blank."""
        return [
            name.upper()
            for name in REQUIRED_SETTINGS
            if not (getattr(self, name) or "").strip()
        ]

    @property
    def is_complete(self) -> bool:
        return not self.missing_settings()

    def log_summary(self) -> None:
        """Log which settings are present, never their values."""
        summary = {
            name.upper(): "Set" if getattr(self, name) else "Not set"
            for name in REQUIRED_SETTINGS
        }
        logger.info(f"Mail configuration check: {summary} (port={self.smtp_port}, secure={self.smtp_secure})")
        missing = self.missing_settings()
        if missing:
            logger.error(f"Missing required email configuration: {', '.join(missing)}")


@lru_cache(maxsize=1)
def get_settings() -> MailSettings:
    return MailSettings()


__all__ = [
    "MailSettings",
    "REQUIRED_SETTINGS",
    "get_settings",
]
