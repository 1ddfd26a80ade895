# music_school/core/config.py
"""Application configuration using Pydantic."""
from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    database_url: str = 'sqlite+aiosqlite:///./music_school.db'

    app_name: str = 'music-school-admin'
    app_version: str = '1.0.0'
    environment: str = 'development'
    log_level: str = 'info'
    allowed_origins: List[str] = ['*']

    # Occurrence generation
    default_lookahead_weeks: int = 4
    max_lookahead_weeks: int = 52

    auto_create_tables: bool = True
    sql_echo: bool = False

    model_config = {
        'env_file': '.env',
        'extra': 'ignore'
    }

@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
