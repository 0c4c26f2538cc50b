"""Configuration helpers for the grocery service.

Resource locations and runtime switches are gathered into one frozen
dataclass so the store, the request log and the Flask app receive them
explicitly instead of reading module globals or the environment directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping
import os

from dotenv import load_dotenv


DEFAULT_ORIGINS = (
    "https://localhost",
    "https://127.0.0.1",
    "http://localhost",
    "http://127.0.0.1",
)


@dataclass(frozen=True)
class AppConfig:
    """Strongly typed configuration for the grocery service."""

    base_dir: Path
    data_file: Path
    log_file: Path
    product_backups: int = 0
    strict_filters: bool = True
    host: str = "0.0.0.0"
    port: int = 3000
    force_tls: bool = False
    allowed_origins: tuple[str, ...] = DEFAULT_ORIGINS


def _coerce_bool(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _coerce_origins(raw: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(raw, str):
        items = [piece.strip() for piece in raw.split(",")]
    else:
        items = [piece.strip() for piece in raw]
    return tuple(filter(None, items)) or DEFAULT_ORIGINS


def _resolve(base_dir: Path, raw: str | None, default: str) -> Path:
    path = Path(raw.strip() if raw and raw.strip() else default)
    return path if path.is_absolute() else base_dir / path


def load_app_config(base_dir: Path | str, env: Mapping[str, str] | None = None) -> AppConfig:
    """Load configuration from ``base_dir/.env`` and the given env mapping."""

    base_dir = Path(base_dir)
    load_dotenv(base_dir / ".env")
    env_map = dict(os.environ if env is None else env)

    return AppConfig(
        base_dir=base_dir,
        data_file=_resolve(base_dir, env_map.get("DATA_FILE"), "grocery.json"),
        log_file=_resolve(base_dir, env_map.get("LOG_FILE"), "logs.txt"),
        product_backups=max(0, int(env_map.get("PRODUCT_BACKUPS", "0"))),
        strict_filters=_coerce_bool(env_map.get("STRICT_FILTERS"), True),
        host=env_map.get("API_HOST", "0.0.0.0"),
        port=int(env_map.get("API_PORT", "3000")),
        force_tls=_coerce_bool(env_map.get("FORCE_TLS"), False),
        allowed_origins=_coerce_origins(env_map.get("ALLOWED_ORIGINS", ",".join(DEFAULT_ORIGINS))),
    )
