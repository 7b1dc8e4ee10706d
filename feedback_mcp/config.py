from __future__ import annotations

import tempfile
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent

_env_file = BASE_DIR / ".env"
if _env_file.exists():
    load_dotenv(_env_file, override=False)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FEEDBACK_MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server identity
    SERVER_NAME: str = "interactive-feedback-macos-mcp"
    SERVER_VERSION: str = "1.0.1"
    APP_TITLE: str = "Feedback Collection"

    # Logging (stderr always; rotating file only when LOG_DIR is set)
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = ""
    MAX_LOG_FILE_SIZE: int = 10 * 1024 * 1024
    BACKUP_COUNT: int = 5

    # Native dialogs
    DIALOG_TIMEOUT_SECONDS: float | None = None
    SERIALIZE_DIALOGS: bool = True

    # Screen capture
    CAPTURE_DIR: str = ""

    @property
    def capture_dir(self) -> Path:
        return Path(self.CAPTURE_DIR) if self.CAPTURE_DIR else Path(tempfile.gettempdir())


def get_settings() -> Settings:
    return Settings()
