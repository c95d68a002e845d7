from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """
    Settings class to retrieve environment variables.
    """

    DATABASE_URL: str = "sqlite+aiosqlite:///./tekno.db"
    ADMIN_TOKEN: str = "change-me"
    DOMAIN: str = "http://localhost:8000"     # localhost or production domain
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost",
        "http://localhost:5000",
    ]

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Repair requests
    TRACKING_NUMBER_PREFIX: str = "TR"
    TRACKING_NUMBER_SUFFIX_LENGTH: int = 4

    model_config = SettingsConfigDict(
        env_file='.env',
        extra='ignore',
    )


Config = Settings()
