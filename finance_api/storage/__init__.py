from .base import (
    InsertResult,
    UpsertResult,
    Stores,
    TransactionStore,
    UserStore,
    parse_object_id,
)
from .memory import MemoryStores
from .mongo import MongoStores
from .factory import create_stores

__all__ = [
    "InsertResult",
    "UpsertResult",
    "Stores",
    "TransactionStore",
    "UserStore",
    "parse_object_id",
    "MemoryStores",
    "MongoStores",
    "create_stores",
]
