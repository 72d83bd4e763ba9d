"""Environment-driven settings."""
import os
from dataclasses import dataclass


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str
    cors_origins: tuple[str, ...]
    sql_echo: bool
    host: str
    port: int


def load_settings() -> Settings:
    origins = os.environ.get("CORS_ORIGINS", "*")
    return Settings(
        database_url=os.environ.get("DATABASE_URL", "sqlite:///./network.db"),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        sql_echo=_as_bool(os.environ.get("SQL_ECHO")),
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "4000")),
    )


settings = load_settings()
