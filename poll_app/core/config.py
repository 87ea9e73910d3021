from functools import lru_cache
import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from poll_app.core.constants import DatabaseConfig, LoggingConfig

# Load environment variables from a .env file
load_dotenv()


class Settings(BaseModel):
    """Process-wide settings, read once at startup and never mutated."""
    port: int = 8080
    database_url: str = DatabaseConfig.DEFAULT_URL
    frontend_url: str = "http://localhost:3000"
    jwt_secret: str = "your-secret-key-change-in-production"
    log_level: str = LoggingConfig.DEFAULT_LOG_LEVEL

    model_config = ConfigDict(frozen=True)


def load_settings() -> Settings:
    values = {
        "port": os.getenv("PORT"),
        "database_url": os.getenv("DATABASE_URL"),
        "frontend_url": os.getenv("FRONTEND_URL"),
        "jwt_secret": os.getenv("JWT_SECRET"),
        "log_level": os.getenv("LOG_LEVEL"),
    }
    # Unset variables fall back to the model defaults
    return Settings(**{key: value for key, value in values.items() if value})


@lru_cache
def get_settings() -> Settings:
    return load_settings()
