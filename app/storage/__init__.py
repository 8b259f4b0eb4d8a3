"""
Project persistence backends.

The backend is chosen once from settings; routes receive it through the
get_project_store dependency.
"""

import logging
from functools import lru_cache

from app.config import Settings, get_settings
from app.db.database import SessionLocal, init_db
from app.storage.base import ProjectStore, StorageError
from app.storage.json_file import JSONFileProjectStore
from app.storage.memory import MemoryProjectStore
from app.storage.sql import SQLProjectStore

logger = logging.getLogger(__name__)

BACKENDS = ("sql", "json", "memory")


def create_project_store(settings: Settings) -> ProjectStore:
    """Build the store for the configured backend."""
    backend = settings.storage_backend.lower()

    if backend == "sql":
        init_db()
        store = SQLProjectStore(SessionLocal)
    elif backend == "json":
        store = JSONFileProjectStore(settings.projects_file)
    elif backend == "memory":
        store = MemoryProjectStore()
    else:
        raise ValueError(
            f"Unknown storage backend {settings.storage_backend!r}, "
            f"expected one of {', '.join(BACKENDS)}"
        )

    logger.info(f"Using {backend} project store")
    return store


@lru_cache()
def get_project_store() -> ProjectStore:
    """Get the process-wide project store."""
    return create_project_store(get_settings())


__all__ = [
    "BACKENDS",
    "JSONFileProjectStore",
    "MemoryProjectStore",
    "ProjectStore",
    "SQLProjectStore",
    "StorageError",
    "create_project_store",
    "get_project_store",
]
