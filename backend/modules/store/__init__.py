"""
Record store module.

Whole-collection key-value persistence standing in for a database.

Public API:
- IRecordStore: Interface for store operations
- CollectionKey: Canonical keys
- InMemoryRecordStore / JsonFileRecordStore: Backends
- StorageFailureError: Raised when a write cannot be completed
"""

from .interfaces import IRecordStore
from .models import CollectionKey, LIST_KEYS, default_for
from .exceptions import StorageFailureError, StorageQuotaExceededError
from .service import (
    BaseRecordStore,
    InMemoryRecordStore,
    JsonFileRecordStore,
    create_record_store,
    get_record_store,
    reset_record_store,
)

__all__ = [
    # Interface
    "IRecordStore",
    # Models
    "CollectionKey",
    "LIST_KEYS",
    "default_for",
    # Exceptions
    "StorageFailureError",
    "StorageQuotaExceededError",
    # Service
    "BaseRecordStore",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "create_record_store",
    "get_record_store",
    "reset_record_store",
]
