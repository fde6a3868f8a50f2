"""
Configuration settings for ProcureQA
"""
import os
from pathlib import Path
from typing import List

import dotenv
from pydantic_settings import BaseSettings

# Resolve .env paths relative to this file so settings load regardless of cwd.
_CONFIG_DIR = Path(__file__).resolve().parent.parent  # backend/
_PROJECT_ROOT = _CONFIG_DIR.parent                    # procureqa/
_ENV_CANDIDATES = [
    _CONFIG_DIR / ".env",
    _PROJECT_ROOT / ".env",
]
_ENV_FILE = [str(p) for p in _ENV_CANDIDATES if p.is_file()]

# Load .env into os.environ so os.getenv defaults below see it too.
for p in _ENV_CANDIDATES:
    if p.is_file():
        dotenv.load_dotenv(p, override=False)
        break


def with_psycopg_driver(url: str) -> str:
    """Hosted Postgres often hands out 'postgresql://'; SQLAlchemy needs the psycopg driver."""
    url = url.strip()
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


class Settings(BaseSettings):
    """Application settings"""

    # App
    APP_NAME: str = "ProcureQA Admin"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    @property
    def database_connection_string(self) -> str:
        """Database URL; local SQLite when nothing is configured."""
        url = (self.DATABASE_URL or "").strip()
        if not url:
            return f"sqlite:///{_CONFIG_DIR / 'procureqa.db'}"
        return with_psycopg_driver(url)

    # Public URL prefix for stored images (category images, supplier logos, banners)
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:5000")

    # File storage
    IMAGES_DIR: str = os.getenv("IMAGES_DIR", str(_CONFIG_DIR / "images"))
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", str(_CONFIG_DIR / "uploads"))
    MAX_IMAGE_BYTES: int = int(os.getenv("MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))

    # Timestamps in list payloads are rendered in this zone
    DISPLAY_TIMEZONE: str = os.getenv("DISPLAY_TIMEZONE", "Asia/Kolkata")

    # CORS - comma-separated
    CORS_ORIGINS: str = "http://localhost:5173,https://procureqa.netlify.app"

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS origins as a list (order kept, duplicates dropped)."""
        origins = [origin.strip() for origin in (self.CORS_ORIGINS or "").split(",") if origin.strip()]
        return list(dict.fromkeys(origins))

    # Security
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me-in-production")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    class Config:
        env_file = _ENV_FILE if _ENV_FILE else [".env", "../.env"]
        case_sensitive = True
        extra = "ignore"


settings = Settings()
