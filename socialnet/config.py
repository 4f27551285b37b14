from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    APP_NAME: str = "socialnet"
    LOG_LEVEL: str = "INFO"

    MONGO_URL: str = "mongodb://localhost:27017"
    MONGO_DB: str = "socialnet"

    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # comma separated, "*" allows everything
    CORS_ORIGINS: str = "http://localhost:5173"

    DEFAULT_PROFILE_PHOTO: str = "https://www.gravatar.com/avatar/?d=mp"
    DEFAULT_BIO: str = "No Bio yet"

    MONGO_SERVER_SELECTION_TIMEOUT_MS: Optional[int] = 5000

    STORY_TTL_SECONDS: int = 24 * 60 * 60
    # 0 turns the background sweep off; reads still skip expired stories
    STORY_SWEEP_INTERVAL_SECONDS: int = 60

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
