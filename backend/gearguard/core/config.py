# backend/gearguard/core/config.py
import json
from functools import lru_cache
from typing import List, Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

THIRTY_DAYS = 30 * 24 * 60 * 60


def _parse_origins(env_val: Optional[str]) -> List[str]:
    if not env_val or env_val.strip() == "*":
        return ["*"]
    try:
        parsed = json.loads(env_val)
        if isinstance(parsed, list):
            return [str(x) for x in parsed]
    except ValueError:
        pass
    return [s.strip() for s in env_val.split(",") if s.strip()]


class Settings(BaseSettings):
    """Runtime configuration, read from the environment and ``.env``, handed to ``create_app``."""

    PROJECT_NAME: str = "GearGuard"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    DATABASE_URL: str = "sqlite:///./gearguard.db"
    AUTO_CREATE_TABLES: bool = True

    JWT_SECRET: str = "dev-secret-change-me"
    JWT_ALG: str = "HS256"
    SESSION_MAX_AGE_SECONDS: int = THIRTY_DAYS
    SESSION_COOKIE_NAME: str = "gearguard_session"
    SESSION_COOKIE_SECURE: bool = False

    BCRYPT_ROUNDS: int = 12

    # "*", a JSON list or a comma separated list
    CORS_ALLOW_ORIGINS: Union[List[str], str] = ["*"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        env_ignore_empty=True,
        extra="ignore",
    )

    @field_validator("CORS_ALLOW_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            return _parse_origins(v)
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def _rounds_in_range(cls, v: int) -> int:
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.strip().upper()


@lru_cache()
def get_settings() -> Settings:
    return Settings()
