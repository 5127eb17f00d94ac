# backend/config.py
import logging
import secrets
from pathlib import Path
from typing import ClassVar, Optional

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"


class Settings(BaseSettings):
    # Empty means the in-memory SQLite store
    DATABASE_URL: Optional[str] = None

    SECRET_KEY: Optional[str] = None
    ALGORITHM: str = "HS256"
    COOKIE_NAME: str = "sid"
    SESSION_MAX_AGE_SECONDS: int = 7 * 24 * 60 * 60

    FRONTEND_URL: Optional[str] = None

    SEED_ON_STARTUP: bool = True
    ADMIN_EMAIL: str = "admin@lumiere.test"
    ADMIN_PASSWORD: str = "admin123"
    ADMIN_NAME: str = "Administrator"

    # Simulated payment gateway
    PAYMENT_DELAY_SECONDS: float = 1.5
    PAYMENT_SUCCESS_RATE: float = 0.95

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"


settings = Settings()

if not settings.SECRET_KEY:
    logger.warning("SECRET_KEY not set. Generating random secret (sessions will not persist across restarts).")
    settings.SECRET_KEY = secrets.token_hex(32)
