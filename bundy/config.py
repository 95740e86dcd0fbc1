"""
Environment-driven settings for the Bundy kiosk.
"""
import datetime
import logging
import os
from dataclasses import dataclass
from typing import Optional

import pytz

from .utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_DB_FILE = "bundy.db"
DEFAULT_TIMEZONE = "Australia/Sydney"
DEFAULT_FIRE_TIME = "23:00"
DEFAULT_POLL_SECONDS = 1.0
DEFAULT_COOLDOWN_SECONDS = 2.0

# Environment variable names
ENV_DB_FILE = "BUNDY_DB_FILE"
ENV_DB_KEY = "BUNDY_ENV_KEY"
ENV_ORG_ID = "BUNDY_ORG_ID"
ENV_TIMEZONE = "BUNDY_TIMEZONE"
ENV_FIRE_TIME = "BUNDY_AUTO_CLOCKOUT_TIME"
ENV_POLL_SECONDS = "BUNDY_POLL_SECONDS"
ENV_COOLDOWN_SECONDS = "BUNDY_TOGGLE_COOLDOWN_SECONDS"
ENV_EXPORT_PATH = "BUNDY_EXPORT_PATH"
ENV_EXPORT_KEY = "BUNDY_EXPORT_KEY"


def parse_fire_time(value: str) -> datetime.time:
    """Parse an HH:MM wall-clock time."""
    try:
        parsed = datetime.datetime.strptime(value.strip(), "%H:%M")
    except (AttributeError, ValueError):
        raise ConfigurationError(f"Invalid auto clock-out time: {value!r}. Expected HH:MM")
    return parsed.time()


def _positive_float(name: str, raw: Optional[str], default: float) -> float:
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    org_id: str
    db_file: str = DEFAULT_DB_FILE
    db_passphrase: Optional[str] = None
    timezone_name: str = DEFAULT_TIMEZONE
    fire_time: datetime.time = datetime.time(23, 0)
    poll_seconds: float = DEFAULT_POLL_SECONDS
    cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS
    export_path: Optional[str] = None
    export_passphrase: Optional[str] = None

    def __post_init__(self):
        if not self.org_id or not str(self.org_id).strip():
            raise ConfigurationError(f"Organization id is required. Set {ENV_ORG_ID}")
        try:
            pytz.timezone(self.timezone_name)
        except pytz.UnknownTimeZoneError:
            raise ConfigurationError(f"Unknown time zone: {self.timezone_name}")

    @property
    def tz(self):
        return pytz.timezone(self.timezone_name)

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            ConfigurationError: on missing organization id or invalid values
        """
        env = os.environ if environ is None else environ
        settings = cls(
            org_id=(env.get(ENV_ORG_ID) or "").strip(),
            db_file=env.get(ENV_DB_FILE) or DEFAULT_DB_FILE,
            db_passphrase=env.get(ENV_DB_KEY) or None,
            timezone_name=env.get(ENV_TIMEZONE) or DEFAULT_TIMEZONE,
            fire_time=parse_fire_time(env.get(ENV_FIRE_TIME) or DEFAULT_FIRE_TIME),
            poll_seconds=_positive_float(ENV_POLL_SECONDS, env.get(ENV_POLL_SECONDS), DEFAULT_POLL_SECONDS),
            cooldown_seconds=_positive_float(
                ENV_COOLDOWN_SECONDS, env.get(ENV_COOLDOWN_SECONDS), DEFAULT_COOLDOWN_SECONDS
            ),
            export_path=env.get(ENV_EXPORT_PATH) or None,
            export_passphrase=env.get(ENV_EXPORT_KEY) or None,
        )
        logger.debug(f"Settings loaded for org {settings.org_id} in {settings.timezone_name}")
        return settings
