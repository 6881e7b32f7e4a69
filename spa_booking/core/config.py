from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings

DEFAULT_BUSINESS_CONFIG = str(Path(__file__).resolve().parents[1] / "data" / "business_config.json")

class Settings(BaseSettings):
    PROJECT_NAME: str = "Spa Booking Service"

    # Server
    PORT: int = 3000
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: List[str] = ["*"]

    # Storage
    BOOKINGS_FILE: str = "bookings.json"
    TESTIMONIALS_FILE: str = "testimonials.json"

    # Naive datetimes from clients are read in this zone, alerts are rendered in it
    TIMEZONE: str = "UTC"

    # Business config (presentation defaults, alert switches)
    BUSINESS_CONFIG_PATH: str = DEFAULT_BUSINESS_CONFIG

    # Telegram
    TELEGRAM_BOT_TOKEN: str = ""
    TELEGRAM_CHAT_ID: str = ""
    TELEGRAM_API_URL: str = "https://api.telegram.org"
    NOTIFICATION_TIMEOUT: float = 10.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
