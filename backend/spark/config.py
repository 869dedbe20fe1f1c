"""
Configuration settings using Pydantic Settings.
"""

from pathlib import Path
from pydantic import model_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

from spark.models.enums import Emotion

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    STORAGE_PATH: str = "data/sparkEntries.json"
    PREFERENCES_PATH: str = "data/preferences.json"

    # Emotion reported on first run, before the user has picked one.
    DEFAULT_EMOTION: Emotion = Emotion.HAPPY
    SEED_DEMO_ENTRIES: bool = False

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    DEBUG: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }

    @model_validator(mode="after")
    def resolve_relative_paths(self):
        storage_path = Path(self.STORAGE_PATH)
        if not storage_path.is_absolute():
            self.STORAGE_PATH = str((BASE_DIR / storage_path).resolve())

        preferences_path = Path(self.PREFERENCES_PATH)
        if not preferences_path.is_absolute():
            self.PREFERENCES_PATH = str((BASE_DIR / preferences_path).resolve())

        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    :return: Cached Settings instance
    :rtype: Settings
    """
    return Settings()
