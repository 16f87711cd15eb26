"""
ClipCast document stores.

Backends:
- MemoryDocumentStore: process-local, for tests and development
- SQLDocumentStore: SQLAlchemy (SQLite by default)
"""

from clipcast.config import StoreConfig
from clipcast.store.base import STATS_KEY, DocumentStore
from clipcast.store.memory import MemoryDocumentStore
from clipcast.store.sql import SQLDocumentStore


def create_store(store_config: StoreConfig) -> DocumentStore:
    """Create the store backend named in configuration."""
    if store_config.backend == "memory":
        return MemoryDocumentStore()
    if store_config.backend == "sql":
        return SQLDocumentStore(store_config.url, echo=store_config.echo)
    raise ValueError(f"Unknown store backend: {store_config.backend}")


__all__ = [
    "STATS_KEY",
    "DocumentStore",
    "MemoryDocumentStore",
    "SQLDocumentStore",
    "create_store",
]
