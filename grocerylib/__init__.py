"""Common helpers shared by the grocery catalog service."""

from .config import AppConfig, load_app_config
from .requestlog import RequestLog
from .storage import CorruptData, ListStore, StorageUnavailable, StoreError  # noqa: F401

__all__ = [
    "AppConfig",
    "load_app_config",
    "RequestLog",
    "ListStore",
    "StoreError",
    "StorageUnavailable",
    "CorruptData",
]
