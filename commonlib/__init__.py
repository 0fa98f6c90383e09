"""Common helpers shared by the catalog service and its scripts."""

from .config import CatalogConfig, load_catalog_config
from .storage import ListStore, SnapshotStore, StoreError

__all__ = [
    "CatalogConfig",
    "load_catalog_config",
    "ListStore",
    "SnapshotStore",
    "StoreError",
]
