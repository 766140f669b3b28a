import json
from pathlib import Path
from typing import Any, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors_origins(value: Any) -> List[str]:
    """Accept a JSON array or a comma-separated list of origins"""
    if isinstance(value, list):
        return [str(origin) for origin in value]
    if not isinstance(value, str):
        return []
    value = value.strip()
    if value.startswith('['):
        try:
            return [str(origin) for origin in json.loads(value)]
        except json.JSONDecodeError:
            pass
    return [origin.strip() for origin in value.split(',') if origin.strip()]


class Settings(BaseSettings):
    """Every knob is read from the environment (or backend/.env)"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Service
    APP_NAME: str = "Campus Ops"
    ENVIRONMENT: str = "development"  # development | testing | production
    DEBUG: bool = True
    TESTING: bool = False
    API_VERSION: str = "v1"
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000
    SECRET_KEY: str

    # Database
    DATABASE_URL: str
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    DB_CREATE_TABLES_ON_STARTUP: bool = True

    # Tokens and passwords
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480  # one working day
    BCRYPT_ROUNDS: int = 12

    # Comma-separated or JSON list
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000"

    # slowapi
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    REQUEST_CREATE_RATE_LIMIT: str = "20/(1 minute)"

    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"  # empty disables the file handler

    # Inventory
    LOW_STOCK_RATIO: float = 0.3  # available below this share of total is LOW_STOCK
    MAX_REQUEST_PAGE_SIZE: int = 100

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    @property
    def log_path(self) -> Path:
        return Path(self.LOG_FILE)

    def is_dev_mode(self) -> bool:
        return self.ENVIRONMENT == "development" or self.DEBUG


settings = Settings()
