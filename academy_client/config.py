import os
from typing import Optional

from pydantic import BaseModel, Field


DEFAULT_API_URL = "http://localhost:3000/api/v1"


class Settings(BaseModel):

    api_url: str = DEFAULT_API_URL
    read_timeout_seconds: float = Field(default=30.0, gt=0)
    mongo_url: Optional[str] = None
    mongo_db_name: str = "academy_client"

    @classmethod
    def from_env(cls) -> "Settings":
        values = {}
        if os.getenv("ACADEMY_API_URL"):
            values["api_url"] = os.getenv("ACADEMY_API_URL")
        if os.getenv("ACADEMY_READ_TIMEOUT"):
            values["read_timeout_seconds"] = os.getenv("ACADEMY_READ_TIMEOUT")
        if os.getenv("MONGO_URL"):
            values["mongo_url"] = os.getenv("MONGO_URL")
        if os.getenv("MONGO_DB_NAME"):
            values["mongo_db_name"] = os.getenv("MONGO_DB_NAME")
        return cls(**values)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
