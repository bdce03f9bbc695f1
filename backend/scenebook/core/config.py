from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class Settings(BaseSettings):
    PROJECT_NAME: str = "Scenebook API"
    API_PREFIX: str = "/api"

    # Async SQLAlchemy URL. Production runs on postgresql+asyncpg://...
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./scenebook.db")
    DB_ECHO: bool = False

    # The single implicit user until a real identity provider is wired in
    DEFAULT_USER_EMAIL: str = os.getenv("DEFAULT_USER_EMAIL", "default.user@email.com")

    # Listing / search pagination
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "5"))
    MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "100"))

    # Request guards
    MAX_PAYLOAD_BYTES: int = int(os.getenv("MAX_PAYLOAD_BYTES", str(64 * 1024)))
    RATE_LIMIT: str = os.getenv("RATE_LIMIT", "120/minute")

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"  # Allow extra fields from .env that aren't defined in Settings

@lru_cache()
def get_settings() -> Settings:
    return Settings()

# Create settings instance
settings = get_settings()
