from pydantic_settings import BaseSettings, SettingsConfigDict
import os

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    source_url: str = os.getenv("SOURCE_URL", "https://ahihidonguoccut-2b5i.onrender.com/mohobomaycai")
    fetch_timeout: float = float(os.getenv("FETCH_TIMEOUT", 10.0))
    sample_count: int = int(os.getenv("SAMPLE_COUNT", 20))
    min_history: int = int(os.getenv("MIN_HISTORY", 20))
    short_window: int = int(os.getenv("SHORT_WINDOW", 20))
    long_window: int = int(os.getenv("LONG_WINDOW", 50))
    scoreboard_size: int = int(os.getenv("SCOREBOARD_SIZE", 100))
    keepalive_url: str | None = os.getenv("KEEPALIVE_URL")
    keepalive_interval: float = float(os.getenv("KEEPALIVE_INTERVAL", 600))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
