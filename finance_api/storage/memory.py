"""In-memory storage for local runs and tests.

Documents are plain dicts keyed by ObjectId, so identifiers look and parse
exactly as they do with MongoDB. Every method runs without awaiting anything,
which makes each call atomic on the event loop.
"""
import copy
from datetime import datetime, timezone
from numbers import Number
from typing import Any, Dict, List, Optional

from bson import ObjectId

from finance_api.models import CategoryTotal, Transaction, UserProfile, UserUpsert
from finance_api.storage.base import InsertResult, Stores, TransactionStore, UpsertResult, UserStore


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _sum_amounts(docs: List[Dict[str, Any]], key: str) -> Dict[Optional[str], float]:
    """Group by ``key`` and sum numeric amounts; other values count as 0 like ``$sum``."""
    totals: Dict[Optional[str], float] = {}
    for doc in docs:
        amount = doc.get("amount")
        value = amount if isinstance(amount, Number) and not isinstance(amount, bool) else 0
        group = doc.get(key)
        totals[group] = totals.get(group, 0) + value
    return totals


class MemoryTransactionStore(TransactionStore):
    """Transactions held in a dict."""

    def __init__(self):
        self._docs: Dict[ObjectId, Dict[str, Any]] = {}

    def _for_email(self, email: str) -> List[Dict[str, Any]]:
        return [doc for doc in self._docs.values() if doc.get("email") == email]

    async def totals_by_type(self, email: str) -> Dict[Optional[str], float]:
        return _sum_amounts(self._for_email(email), "type")

    async def list_for_email(self, email: str) -> List[Transaction]:
        docs = sorted(
            self._for_email(email),
            key=lambda doc: doc.get("createdAt") or _EPOCH,
            reverse=True,
        )
        return [Transaction.from_document(doc) for doc in docs]

    async def totals_by_category(self, email: str) -> List[CategoryTotal]:
        totals = _sum_amounts(self._for_email(email), "category")
        return [CategoryTotal(category=category, total=total) for category, total in totals.items()]

    async def get(self, transaction_id: ObjectId) -> Optional[Transaction]:
        doc = self._docs.get(transaction_id)
        return Transaction.from_document(doc) if doc else None

    async def insert(self, document: Dict[str, Any]) -> InsertResult:
        doc = copy.deepcopy(document)
        doc["_id"] = ObjectId()
        self._docs[doc["_id"]] = doc
        return InsertResult(str(doc["_id"]), True)

    async def update(self, transaction_id: ObjectId, changes: Dict[str, Any]) -> bool:
        doc = self._docs.get(transaction_id)
        if doc is None:
            return False
        doc.update(copy.deepcopy(changes))
        return True

    async def delete(self, transaction_id: ObjectId) -> bool:
        return self._docs.pop(transaction_id, None) is not None


class MemoryUserStore(UserStore):
    """User profiles held in a dict keyed by email."""

    def __init__(self):
        self._by_email: Dict[str, Dict[str, Any]] = {}

    async def get_by_email(self, email: str) -> Optional[UserProfile]:
        doc = self._by_email.get(email)
        return UserProfile.from_document(doc) if doc else None

    async def upsert(self, user: UserUpsert, now: datetime) -> UpsertResult:
        existing = self._by_email.get(user.email)
        if existing is not None:
            existing.update(firstName=user.first_name, imgUrl=user.img_url, updatedAt=now)
            if user.password:
                existing["password"] = user.password
            return UpsertResult(str(existing["_id"]), False)

        doc = {
            "_id": ObjectId(),
            "firstName": user.first_name,
            "email": user.email,
            "imgUrl": user.img_url,
            "createdAt": now,
        }
        if user.password:
            doc["password"] = user.password
        self._by_email[user.email] = doc
        return UpsertResult(str(doc["_id"]), True)


class MemoryStores(Stores):
    def __init__(self):
        self.transactions = MemoryTransactionStore()
        self.users = MemoryUserStore()

    async def close(self) -> None:
        pass
