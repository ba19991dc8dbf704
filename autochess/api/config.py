"""
API configuration settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """API settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = True

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Simulation
    DEFAULT_SEED: Optional[int] = None
    LIVE_TICK_INTERVAL: Optional[float] = None  # seconds; None paces at the tick length


settings = Settings()
