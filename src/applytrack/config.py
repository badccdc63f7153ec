"""Configuration management for ApplyTrack."""

import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

APPLYTRACK_HOME = Path(os.environ.get("APPLYTRACK_HOME", Path.home() / "applytrack"))
CONFIG_FILE = APPLYTRACK_HOME / "config" / "applytrack.conf"
SESSION_FILE = APPLYTRACK_HOME / "config" / ".session.json"
DATA_DIR = APPLYTRACK_HOME / "data"


@dataclass
class Config:
    """ApplyTrack configuration."""

    supabase_url: str = ""
    supabase_anon_key: str = ""
    timezone: str = "America/Toronto"
    # Email notifications
    email_notifications: bool = False
    notification_email: str = ""
    resend_api_key: str = ""
    email_from: str = "Job Tracker <noreply@jobtracker.com>"
    reminder_digest_time: str = "08:00"
    export_dir: str = ""
    completion_file: str = ""
    poll_interval: int = 30


@dataclass
class Session:
    """Supabase auth session for the signed-in user."""

    access_token: str = ""
    refresh_token: str = ""
    expires_at: int = 0
    user_id: str = ""
    email: str = ""
    role: str = "applicant"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def expires_soon(self, margin: int = 300) -> bool:
        return bool(self.expires_at) and time.time() >= self.expires_at - margin

    def save(self) -> None:
        """Save session to file."""
        SESSION_FILE.parent.mkdir(parents=True, exist_ok=True)
        SESSION_FILE.write_text(
            json.dumps(
                {
                    "access_token": self.access_token,
                    "refresh_token": self.refresh_token,
                    "expires_at": self.expires_at,
                    "user_id": self.user_id,
                    "email": self.email,
                    "role": self.role,
                }
            )
        )
        SESSION_FILE.chmod(0o600)

    @classmethod
    def load(cls) -> "Session":
        """Load session from file."""
        if not SESSION_FILE.exists():
            return cls()
        try:
            data = json.loads(SESSION_FILE.read_text())
            return cls(
                access_token=data.get("access_token", ""),
                refresh_token=data.get("refresh_token", ""),
                expires_at=data.get("expires_at", 0),
                user_id=data.get("user_id", ""),
                email=data.get("email", ""),
                role=data.get("role", "applicant"),
            )
        except (json.JSONDecodeError, KeyError):
            return cls()


def _parse_bool(value: str) -> bool:
    return value.lower() in ("1", "true", "yes", "on")


def parse_config(text: str) -> Config:
    """Parse KEY=value lines into a Config."""
    config = Config()

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value.startswith('"') or value.startswith("'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        match key:
            case "supabase_url":
                config.supabase_url = value.rstrip("/")
            case "supabase_anon_key":
                config.supabase_anon_key = value
            case "timezone":
                config.timezone = value
            case "email_notifications":
                config.email_notifications = _parse_bool(value)
            case "notification_email":
                config.notification_email = value
            case "resend_api_key":
                config.resend_api_key = value
            case "email_from":
                config.email_from = value
            case "reminder_digest_time":
                config.reminder_digest_time = value
            case "export_dir":
                config.export_dir = value
            case "completion_file":
                config.completion_file = value
            case "poll_interval":
                try:
                    config.poll_interval = int(value)
                except ValueError:
                    logger.warning(f"Invalid POLL_INTERVAL: {value}")

    return config


def load_config() -> Config:
    """Load configuration from applytrack.conf file."""
    if not CONFIG_FILE.exists():
        return Config()
    return parse_config(CONFIG_FILE.read_text())
