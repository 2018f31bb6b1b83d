from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from fastapi import Depends
from typing_extensions import Annotated


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Todo API"
    app_version: str = "1.0.0"
    database_url: str = "sqlite+aiosqlite:///./tasks.db"
    database_echo: bool = False
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000
    recent_tasks_limit: int = 10  # size of GET /api/tasks/recent


@lru_cache
def get_settings() -> Settings:
    return Settings()


SettingsDep = Annotated[Settings, Depends(get_settings)]
