import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from .exceptions import ConfigurationError

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Server
HOST = os.getenv("HOST", "0.0.0.0")  # noqa: S104 - container default
PORT = int(os.getenv("PORT", "5000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS - any origin unless narrowed
ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]

# Booking defaults
DEFAULT_TIME_ZONE = os.getenv("DEFAULT_TIME_ZONE", "Asia/Kolkata")
TIMEZONE_OFFSET = os.getenv("TIMEZONE_OFFSET", "+05:30")

# Google Calendar
GOOGLE_CALENDAR_SCOPES = ["https://www.googleapis.com/auth/calendar"]

# SMTP relay (Gmail by default, STARTTLS on 587)
SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_VERIFY_ON_STARTUP = os.getenv("SMTP_VERIFY_ON_STARTUP", "true").lower() == "true"

REQUIRED_ENV_VARS = ["CREDENTIALS", "CALENDAR_ID", "GMEETLINK", "EMAIL_USER", "EMAIL_PASS"]


class Settings(BaseModel):
    """Process-wide settings needed to build the provider gateways."""

    credentials_json: str
    calendar_id: str
    meeting_link: str
    email_user: str
    email_password: str
    default_time_zone: str = DEFAULT_TIME_ZONE
    timezone_offset: str = TIMEZONE_OFFSET
    smtp_host: str = SMTP_HOST
    smtp_port: int = SMTP_PORT
    smtp_verify_on_startup: bool = SMTP_VERIFY_ON_STARTUP

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "Settings":
        """
        Read required settings from the environment.

        Raises:
            ConfigurationError: naming every required variable that is unset or empty
        """
        environ = os.environ if environ is None else environ
        missing = [name for name in REQUIRED_ENV_VARS if not environ.get(name)]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )

        return cls(
            credentials_json=environ["CREDENTIALS"],
            calendar_id=environ["CALENDAR_ID"],
            meeting_link=environ["GMEETLINK"],
            email_user=environ["EMAIL_USER"],
            email_password=environ["EMAIL_PASS"],
        )
