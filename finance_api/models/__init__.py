from .transaction import (
    Transaction,
    TransactionCreate,
    TransactionUpdate,
    InsertResponse,
    Overview,
    CategoryTotal,
    MessageResponse,
)
from .user import UserUpsert, UserProfile, UserUpsertResponse

__all__ = [
    "Transaction",
    "TransactionCreate",
    "TransactionUpdate",
    "InsertResponse",
    "Overview",
    "CategoryTotal",
    "MessageResponse",
    "UserUpsert",
    "UserProfile",
    "UserUpsertResponse",
]
