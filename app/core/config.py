from __future__ import annotations

import os
from functools import lru_cache
from dotenv import load_dotenv, find_dotenv

_env_path = find_dotenv(".env") or ".env"
load_dotenv(_env_path, override=False)


class Settings:
    """Central configuration (env driven)."""

    def __init__(self) -> None:
        # Database
        self.database_url: str = os.getenv("DATABASE_URL", "")
        self.db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "5"))
        self.db_max_overflow: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
        self.db_pool_timeout: int = int(os.getenv("DB_POOL_TIMEOUT", "5"))
        self.db_connect_timeout: int = int(os.getenv("DB_CONNECT_TIMEOUT", "5"))
        # Auth (tokens are issued elsewhere, we only verify them)
        self.jwt_secret: str = os.getenv("JWT_SECRET", "")
        self.jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
        # Workflow gates
        self.guidance_quota: int = int(os.getenv("GUIDANCE_QUOTA", "8"))
        # App meta
        self.app_name: str = "Capstone Workflow Backend"
        self.debug: bool = os.getenv("DEBUG", "False").lower() == "true"
        self.allow_origins: str = os.getenv(
            "ALLOW_ORIGINS",
            "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173,http://127.0.0.1:3000",
        )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def get_database_url(self) -> str:
        return self.database_url


@lru_cache()
def get_settings() -> Settings:
    return Settings()
