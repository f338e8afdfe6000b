"""Abstract storage interfaces."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, NamedTuple, Optional

from bson import ObjectId
from bson.errors import InvalidId as BSONInvalidId

from finance_api.errors import InvalidId
from finance_api.models import CategoryTotal, Transaction, UserProfile, UserUpsert


class InsertResult(NamedTuple):
    inserted_id: str
    acknowledged: bool


class UpsertResult(NamedTuple):
    user_id: str
    created: bool


def parse_object_id(value: str) -> ObjectId:
    """
    Parse a path identifier.

    Raises:
        InvalidId: If ``value`` is not a 24-character hex ObjectId
    """
    try:
        return ObjectId(value)
    except (BSONInvalidId, TypeError) as exc:
        raise InvalidId() from exc


class TransactionStore(ABC):
    """Storage for transactions."""

    @abstractmethod
    async def totals_by_type(self, email: str) -> Dict[Optional[str], float]:
        """Sum of ``amount`` per ``type`` for one email."""

    @abstractmethod
    async def list_for_email(self, email: str) -> List[Transaction]:
        """All transactions of one email, newest ``createdAt`` first."""

    @abstractmethod
    async def totals_by_category(self, email: str) -> List[CategoryTotal]:
        """Sum of ``amount`` per ``category`` for one email, in no particular order."""

    @abstractmethod
    async def get(self, transaction_id: ObjectId) -> Optional[Transaction]:
        pass

    @abstractmethod
    async def insert(self, document: Dict[str, Any]) -> InsertResult:
        pass

    @abstractmethod
    async def update(self, transaction_id: ObjectId, changes: Dict[str, Any]) -> bool:
        """Set ``changes`` on the record; returns False if nothing matched."""

    @abstractmethod
    async def delete(self, transaction_id: ObjectId) -> bool:
        """Remove the record; returns False if nothing matched."""


class UserStore(ABC):
    """Storage for user profiles, keyed by email."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[UserProfile]:
        pass

    @abstractmethod
    async def upsert(self, user: UserUpsert, now: datetime) -> UpsertResult:
        """
        Create the user or update the one holding ``user.email``, atomically.

        On update ``firstName``, ``imgUrl`` and ``updatedAt`` change and the
        password only when a new one is given. On create ``createdAt`` is set
        and ``updatedAt`` stays absent.
        """


class Stores(ABC):
    """Process-wide handle on both stores, opened once at startup."""

    transactions: TransactionStore
    users: UserStore

    async def connect(self) -> None:
        """Prepare the backend (connectivity check, indexes)."""

    @abstractmethod
    async def close(self) -> None:
        pass
