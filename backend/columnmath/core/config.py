from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    app_name: str = "Column Math Coach"
    debug: bool = False
    log_level: str = "INFO"

    # Demo playback
    playback_interval_ms: int = 1500
    narrate_on_seek: bool = True

    # Problem sampling
    max_sample_attempts: int = 100

    # CORS
    frontend_url: str = "http://localhost:3000"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
