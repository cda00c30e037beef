import os
from pathlib import Path

# Basic settings helper to read environment configuration.

BACKEND_ROOT = Path(__file__).resolve().parent


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_int(val: str | None, default: int) -> int:
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError:
        return default


def _as_list(val: str | None, default: list[str]) -> list[str]:
    if val is None or not val.strip():
        return default
    return [item.strip() for item in val.split(",") if item.strip()]


class Settings:
    def __init__(self) -> None:
        self.DB_PATH: str = os.getenv("DAYLOG_DB_PATH") or str(BACKEND_ROOT / "daylog.db")
        self.LOG_LEVEL: str = (os.getenv("DAYLOG_LOG_LEVEL") or "INFO").upper()
        self.MAX_PHOTOS_PER_EVENT: int = _as_int(os.getenv("DAYLOG_MAX_PHOTOS"), 10)
        # Deleting an event also removes its dump
        self.CASCADE_DELETE: bool = _as_bool(os.getenv("DAYLOG_CASCADE_DELETE"), True)
        self.RENDER_WIDTH: int = _as_int(os.getenv("DAYLOG_RENDER_WIDTH"), 1080)
        # Comma-separated origins allowed to call the API from a browser
        self.CORS_ORIGINS: list[str] = _as_list(os.getenv("DAYLOG_CORS_ORIGINS"), ["*"])


settings = Settings()
