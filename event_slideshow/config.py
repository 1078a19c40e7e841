"""Runtime configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
import os


@dataclass(frozen=True)
class AppSettings:
    """Environment-backed settings for the web app and the reclaim worker."""

    cloud_name: str
    api_key: str
    api_secret: str
    host: str
    port: int
    collection: str
    retention_seconds: int
    reclaim_interval_seconds: int
    reclaim_page_size: int
    reclaim_on_upload: bool
    gallery_limit: int
    store_timeout_seconds: float
    event_title: str
    public_base_url: str | None
    log_level: str

    @property
    def retention_window(self) -> timedelta:
        return timedelta(seconds=self.retention_seconds)


CREDENTIAL_VARS = (
    "CLOUDINARY_CLOUD_NAME",
    "CLOUDINARY_API_KEY",
    "CLOUDINARY_API_SECRET",
)
TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer for {name}: {value}") from exc


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid float for {name}: {value}") from exc


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise RuntimeError(f"Invalid boolean for {name}: {value}")


def _require_credentials() -> tuple[str, str, str]:
    values = [os.getenv(name, "").strip() for name in CREDENTIAL_VARS]
    missing = [name for name, value in zip(CREDENTIAL_VARS, values) if not value]
    if missing:
        raise RuntimeError(
            "Missing Cloudinary credentials: " + ", ".join(missing)
            + ". Set them in the environment or in a .env file."
        )
    cloud_name, api_key, api_secret = values
    return cloud_name, api_key, api_secret


def load_settings() -> AppSettings:
    """Load all app settings from the environment."""
    cloud_name, api_key, api_secret = _require_credentials()
    retention_seconds = _env_int("RETENTION_SECONDS", 300)
    if retention_seconds <= 0:
        raise RuntimeError(f"RETENTION_SECONDS must be positive: {retention_seconds}")
    page_size = _env_int("RECLAIM_PAGE_SIZE", 100)
    if not 1 <= page_size <= 500:
        raise RuntimeError(f"RECLAIM_PAGE_SIZE must be between 1 and 500: {page_size}")
    return AppSettings(
        cloud_name=cloud_name,
        api_key=api_key,
        api_secret=api_secret,
        host=os.getenv("HOST", "0.0.0.0"),
        port=_env_int("PORT", 3000),
        collection=os.getenv("SLIDESHOW_COLLECTION", "slideshow"),
        retention_seconds=retention_seconds,
        reclaim_interval_seconds=_env_int("RECLAIM_INTERVAL_SECONDS", 3600),
        reclaim_page_size=page_size,
        reclaim_on_upload=_env_bool("RECLAIM_ON_UPLOAD", True),
        gallery_limit=_env_int("GALLERY_LIMIT", 30),
        store_timeout_seconds=_env_float("STORE_TIMEOUT_SECONDS", 30.0),
        event_title=os.getenv("EVENT_TITLE", "Slideshow"),
        public_base_url=os.getenv("PUBLIC_BASE_URL") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
