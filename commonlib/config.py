"""Configuration helpers for the catalog service.

Values come from the process environment after ``<base_dir>/.env`` has been
loaded, so installers and tests can prime them without touching the
application module.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping
import os

from dotenv import load_dotenv

DEFAULT_ORIGINS = (
    "http://localhost",
    "http://127.0.0.1",
    "https://localhost",
    "https://127.0.0.1",
)
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class CatalogConfig:
    """Strongly typed configuration for the catalog API."""

    base_dir: Path
    data_dir: Path
    upload_dir: Path
    secret_key: str
    allowed_origins: tuple[str, ...]
    host: str = "0.0.0.0"
    port: int = 3001
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    snapshot_backups: int = 2
    force_tls: bool = False
    log_level: str = "INFO"

    @property
    def upload_url_prefix(self) -> str:
        return "/uploads"


def _coerce_origins(raw: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(raw, str):
        items = [piece.strip() for piece in raw.split(",")]
    else:
        items = [piece.strip() for piece in raw]
    return tuple(filter(None, items)) or DEFAULT_ORIGINS


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _resolve_dir(base_dir: Path, raw: str | None, default: str) -> Path:
    path = Path(raw) if raw else Path(default)
    return path if path.is_absolute() else base_dir / path


def load_catalog_config(base_dir: Path, env: Mapping[str, str] | None = None) -> CatalogConfig:
    """Load catalog configuration from the given base directory and env mapping."""

    base_dir = Path(base_dir)
    load_dotenv(base_dir / ".env")
    env_map = dict(os.environ if env is None else env)

    return CatalogConfig(
        base_dir=base_dir,
        data_dir=_resolve_dir(base_dir, env_map.get("DATA_DIR"), "data"),
        upload_dir=_resolve_dir(base_dir, env_map.get("UPLOAD_DIR"), "uploads"),
        secret_key=env_map.get("SECRET_KEY", "dev-change-me"),
        allowed_origins=_coerce_origins(env_map.get("ALLOWED_ORIGINS", "")),
        host=env_map.get("HOST", "0.0.0.0"),
        port=int(env_map.get("PORT", "3001")),
        max_upload_bytes=int(env_map.get("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))),
        snapshot_backups=int(env_map.get("SNAPSHOT_BACKUPS", "2")),
        force_tls=_coerce_bool(env_map.get("FORCE_TLS"), False),
        log_level=env_map.get("LOG_LEVEL", "INFO").upper(),
    )
