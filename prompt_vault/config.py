import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DEFAULT_DATABASE_URL = "sqlite:///./data/prompt-vault.db"
DEFAULT_PORT = 3108


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    static_dir: str = field(default_factory=lambda: os.path.join(PROJECT_ROOT, "static"))
    sql_echo: bool = False  # Set to True for SQL debugging

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the environment (and .env, if present)."""
        return cls(
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", DEFAULT_PORT)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            static_dir=os.getenv("STATIC_DIR", os.path.join(PROJECT_ROOT, "static")),
            sql_echo=_env_flag("SQL_ECHO"),
        )
