"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "relay.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)

DEFAULT_DIALOG_VERSION_DATE = "2017-04-21"


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Runtime settings, normally read from the environment."""

    user_db_path: PathLike = DEFAULT_DB_PATH
    dialog_db_path: PathLike = DEFAULT_DB_PATH
    dialog_service_url: str | None = None
    dialog_service_username: str | None = None
    dialog_service_password: str | None = None
    dialog_workspace_id: str | None = None
    dialog_version_date: str = DEFAULT_DIALOG_VERSION_DATE
    dialog_service_timeout: float = 30.0
    foursquare_client_id: str | None = None
    foursquare_client_secret: str | None = None
    slack_bot_token: str | None = None
    api_host: str = "localhost"
    api_port: int = 8000
    serialize_per_sender: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        database_url = os.getenv("DATABASE_URL")
        return cls(
            user_db_path=resolve_db_path(os.getenv("USER_DB_URL") or database_url),
            dialog_db_path=resolve_db_path(
                os.getenv("DIALOG_DB_URL") or database_url
            ),
            dialog_service_url=os.getenv("DIALOG_SERVICE_URL"),
            dialog_service_username=os.getenv("DIALOG_SERVICE_USERNAME"),
            dialog_service_password=os.getenv("DIALOG_SERVICE_PASSWORD"),
            dialog_workspace_id=os.getenv("DIALOG_WORKSPACE_ID"),
            dialog_version_date=os.getenv(
                "DIALOG_VERSION_DATE", DEFAULT_DIALOG_VERSION_DATE
            ),
            dialog_service_timeout=float(os.getenv("DIALOG_SERVICE_TIMEOUT", "30")),
            foursquare_client_id=os.getenv("FOURSQUARE_CLIENT_ID"),
            foursquare_client_secret=os.getenv("FOURSQUARE_CLIENT_SECRET"),
            slack_bot_token=os.getenv("SLACK_BOT_TOKEN"),
            api_host=os.getenv("API_HOST", "localhost"),
            api_port=int(os.getenv("API_PORT", "8000")),
            serialize_per_sender=_env_flag("SERIALIZE_PER_SENDER"),
        )
