from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

DEFAULT_CHAT_URL = "https://channels-de-na1.niceincontact.com/chat"

# Project root (parent of threadline/) - used so .env is found regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Explicitly load .env into os.environ so it works in tests and subprocesses
load_dotenv(_PROJECT_ROOT / ".env")


class Settings(BaseSettings):
    app_name: str = "threadline"
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("ENV", "ENVIRONMENT"),
    )
    log_level: str = Field(default="INFO", json_schema_extra={"env": "LOG_LEVEL"})

    # Chat connection
    chat_url: str = Field(
        default=DEFAULT_CHAT_URL, json_schema_extra={"env": "CHAT_URL"}
    )
    brand_id: int = Field(default=0, json_schema_extra={"env": "BRAND_ID"})
    channel_id: str = Field(default="", json_schema_extra={"env": "CHANNEL_ID"})
    device_token: Optional[str] = Field(
        default=None, json_schema_extra={"env": "DEVICE_TOKEN"}
    )

    # Attachments
    documents_dir: Optional[str] = Field(
        default=None, json_schema_extra={"env": "DOCUMENTS_DIR"}
    )
    upload_timeout_seconds: int = Field(
        default=30, ge=1, json_schema_extra={"env": "UPLOAD_TIMEOUT_SECONDS"}
    )

    @property
    def is_production(self) -> bool:
        """Check if the current environment is production."""
        return self.environment.lower() == "production"

    @property
    def is_test(self) -> bool:
        """Check if the current environment is test."""
        return self.environment.lower() == "test"

    @property
    def documents_path(self) -> Optional[Path]:
        """Private documents directory; files under it are read without scoped access."""
        if not self.documents_dir:
            return None
        return Path(self.documents_dir).expanduser().resolve()

    class ConfigDict:
        env_file = str(_PROJECT_ROOT / ".env")
        env_file_encoding = "utf-8"
        extra = "allow"  # Allow extra environment variables


def get_settings() -> Settings:
    """Get application settings with required environment variables."""
    return Settings()
