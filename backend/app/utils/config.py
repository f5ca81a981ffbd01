"""Environment configuration accessors.

Values are read at call time so a running process (or a test) sees the
current environment.
"""
import os
from typing import List, Optional

DEFAULT_DATABASE_URL = "postgresql+psycopg2://postgres:postgres@db:5432/press_estimator"
_TRUE = {"1", "true", "yes", "on"}


def _get(key: str, default: str = "") -> str:
    val = os.getenv(key, "").strip()
    return val if val else default


def _get_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key, "").strip().lower()
    if not raw:
        return default
    return raw in _TRUE


def database_url() -> str:
    return _get("DATABASE_URL", DEFAULT_DATABASE_URL)


def sql_echo() -> bool:
    return _get_bool("SQL_ECHO", False)


def log_level() -> str:
    return _get("LOG_LEVEL", "INFO").upper()


def allowed_origins() -> List[str]:
    raw = _get("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:80")
    return [o.strip() for o in raw.split(",") if o.strip()]


def seed_reference_data() -> bool:
    return _get_bool("SEED_REFERENCE_DATA", True)


def storage_url() -> Optional[str]:
    """Base URL of a remote storage service; unset means the local bucket is used."""
    val = _get("STORAGE_URL")
    return val.rstrip("/") or None


def storage_key() -> Optional[str]:
    return _get("STORAGE_KEY") or None


def storage_bucket() -> str:
    return _get("STORAGE_BUCKET", "covers")


def storage_root() -> str:
    return _get("STORAGE_ROOT", os.path.join(os.getcwd(), "storage"))


def public_storage_base_url() -> str:
    return _get("PUBLIC_STORAGE_BASE_URL", "/storage").rstrip("/")


def storage_timeout() -> float:
    raw = _get("STORAGE_TIMEOUT", "10")
    try:
        return float(raw)
    except ValueError:
        return 10.0


def host() -> str:
    return _get("HOST", "0.0.0.0")


def port() -> int:
    raw = _get("PORT", "8000")
    try:
        return int(raw)
    except ValueError:
        return 8000
