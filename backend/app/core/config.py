import os
from typing import List
from pathlib import Path
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Look for .env file in the backend directory relative to this file
    _backend_dir = Path(__file__).parent.parent.parent
    # Allow extra env vars so unexpected keys don't crash local runs
    model_config = ConfigDict(env_file=_backend_dir / ".env", extra='ignore')

    # Application settings
    debug: bool = False
    log_level: str = "info"
    LOG_DIR: str = os.getenv("LOG_DIR", "")

    # Database (production runs on postgresql+asyncpg://...)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./ecofinance.db")
    DB_ECHO: bool = False

    # Security
    JWT_SECRET: str = os.getenv("JWT_SECRET", "your-secret-key")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60
    MIN_PASSWORD_LENGTH: int = 6

    # Frontend / CORS
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")
    ALLOWED_HOSTS: List[str] = ["*"]


settings = Settings()
