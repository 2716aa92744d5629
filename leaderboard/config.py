import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./leaderboard.db"
DEFAULT_ORIGINS = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def get_database_url() -> str:
    url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    # Ensure the URL uses asyncpg
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Runtime settings, read from the environment (and `.env`)."""

    database_url: str = DEFAULT_DATABASE_URL
    environment: str = "development"
    sql_echo: bool = False
    port: int = 5000
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ORIGINS))

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=get_database_url(),
            environment=os.getenv("ENV", "development"),
            sql_echo=_env_flag("SQL_ECHO"),
            port=int(os.getenv("PORT", "5000")),
            cors_origins=_env_list("CORS_ORIGINS", DEFAULT_ORIGINS),
        )
