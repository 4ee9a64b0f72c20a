from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_FACTS_PATH = os.path.join(os.path.dirname(__file__), "data", "countries.json")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"
    CORS_ORIGIN_REGEX: Optional[str] = None
    FACTS_PATH: str = DEFAULT_FACTS_PATH
    DEFAULT_NUM_QUESTIONS: int = 20
    MAX_NUM_QUESTIONS: int = 50
    NAME_MAX_LENGTH: int = 18
    ROOM_CODE_LENGTH: int = 6
    ROOM_CODE_ATTEMPTS: int = 100
    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
