# pharmacy_service/config.py
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY


def _database_url_from_parts() -> str:
    return (
        f"postgresql+asyncpg://{os.getenv('PHARMACARE_DB_USER')}:{os.getenv('PHARMACARE_DB_PASSWORD')}"
        f"@{os.getenv('PHARMACARE_DB_HOST')}:{os.getenv('PHARMACARE_DB_PORT')}/{os.getenv('PHARMACARE_DB_NAME')}"
    )


@dataclass
class Settings:
    database_url: str
    database_echo: bool = False
    frontend_url: str = "http://localhost:3000"
    secret_key: str = "your_secret_key"
    jwt_algorithm: str = "HS256"
    log_level: str = "INFO"
    seed_demo_data: bool = False
    host: str = "0.0.0.0"
    port: int = 8080

    @classmethod
    def from_env(cls, database_url: Optional[str] = None) -> "Settings":
        """Build settings from the process environment (and a .env file, if any)."""
        return cls(
            database_url=database_url or os.getenv("DATABASE_URL") or _database_url_from_parts(),
            database_echo=_env_bool("DATABASE_ECHO"),
            frontend_url=os.getenv("FRONTEND_URL", "http://localhost:3000"),
            secret_key=os.getenv("SECRET_KEY", "your_secret_key"),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            seed_demo_data=_env_bool("SEED_DEMO_DATA"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8080")),
        )
