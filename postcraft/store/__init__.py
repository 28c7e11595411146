import logging
from functools import lru_cache

from postcraft.core.config import DATA_DIR, STORE_BACKEND
from postcraft.store.base import Store
from postcraft.store.json_store import JsonFileStore
from postcraft.store.sql_store import SqlStore

logger = logging.getLogger(__name__)

STORE_BACKENDS = ("sql", "json")


def build_store(backend: str) -> Store:
    """Instantiate the configured backend. The workflow never depends on which one."""
    if backend == "json":
        logger.info("Using JSON file store at %s", DATA_DIR)
        return JsonFileStore(DATA_DIR)
    if backend == "sql":
        from postcraft.db.session import SessionLocal
        logger.info("Using SQL store")
        return SqlStore(SessionLocal)
    raise ValueError(
        f"Unknown STORE_BACKEND {backend!r}; expected one of {', '.join(STORE_BACKENDS)}"
    )


@lru_cache(maxsize=1)
def get_store() -> Store:
    return build_store(STORE_BACKEND)


__all__ = [
    "Store",
    "SqlStore",
    "JsonFileStore",
    "build_store",
    "get_store",
]
