"""MongoDB storage using the PyMongo async client."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, AsyncMongoClient, ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from finance_api.config import Settings
from finance_api.errors import StoreError
from finance_api.models import CategoryTotal, Transaction, UserProfile, UserUpsert
from finance_api.storage.base import InsertResult, Stores, TransactionStore, UpsertResult, UserStore

logger = logging.getLogger(__name__)

USER_PROJECTION = {"_id": 1, "firstName": 1, "email": 1, "imgUrl": 1, "createdAt": 1, "updatedAt": 1}


@asynccontextmanager
async def _store_errors(operation: str):
    """Turn driver failures into StoreError, keeping the detail in the log only."""
    try:
        yield
    except PyMongoError as exc:
        logger.exception("MongoDB operation failed", extra={"operation": operation})
        raise StoreError() from exc


def build_user_upsert_pipeline(user: UserUpsert, now: datetime) -> List[Dict[str, Any]]:
    """
    Update pipeline for the create-or-update user write.

    ``createdAt`` is missing only on the document the upsert is inserting,
    which is what decides between stamping ``createdAt`` and ``updatedAt``.
    Client strings go through ``$literal`` so a leading "$" is not read as a
    field path.
    """
    fields: Dict[str, Any] = {
        "firstName": {"$literal": user.first_name},
        "imgUrl": {"$literal": user.img_url},
        "createdAt": {"$ifNull": ["$createdAt", now]},
        "updatedAt": {
            "$cond": [{"$eq": [{"$type": "$createdAt"}, "missing"]}, "$$REMOVE", now],
        },
    }
    if user.password:
        fields["password"] = {"$literal": user.password}
    return [{"$set": fields}]


class MongoTransactionStore(TransactionStore):
    """Transactions kept in one MongoDB collection."""

    def __init__(self, collection: AsyncCollection):
        self.collection = collection

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("email", ASCENDING), ("createdAt", DESCENDING)])

    async def _aggregate(self, pipeline: List[Dict[str, Any]], operation: str) -> List[Dict[str, Any]]:
        async with _store_errors(operation):
            cursor = await self.collection.aggregate(pipeline)
            return await cursor.to_list()

    async def totals_by_type(self, email: str) -> Dict[Optional[str], float]:
        rows = await self._aggregate(
            [
                {"$match": {"email": email}},
                {"$group": {"_id": "$type", "total": {"$sum": "$amount"}}},
            ],
            "totals_by_type",
        )
        return {row["_id"]: row["total"] for row in rows}

    async def list_for_email(self, email: str) -> List[Transaction]:
        async with _store_errors("list_for_email"):
            docs = await self.collection.find({"email": email}).sort("createdAt", DESCENDING).to_list()
        return [Transaction.from_document(doc) for doc in docs]

    async def totals_by_category(self, email: str) -> List[CategoryTotal]:
        rows = await self._aggregate(
            [
                {"$match": {"email": email}},
                {"$group": {"_id": "$category", "total": {"$sum": "$amount"}}},
            ],
            "totals_by_category",
        )
        return [CategoryTotal(category=row["_id"], total=row["total"]) for row in rows]

    async def get(self, transaction_id: ObjectId) -> Optional[Transaction]:
        async with _store_errors("get_transaction"):
            doc = await self.collection.find_one({"_id": transaction_id})
        return Transaction.from_document(doc) if doc else None

    async def insert(self, document: Dict[str, Any]) -> InsertResult:
        async with _store_errors("insert_transaction"):
            result = await self.collection.insert_one(document)
        return InsertResult(str(result.inserted_id), result.acknowledged)

    async def update(self, transaction_id: ObjectId, changes: Dict[str, Any]) -> bool:
        async with _store_errors("update_transaction"):
            result = await self.collection.update_one({"_id": transaction_id}, {"$set": changes})
        return result.matched_count > 0

    async def delete(self, transaction_id: ObjectId) -> bool:
        async with _store_errors("delete_transaction"):
            result = await self.collection.delete_one({"_id": transaction_id})
        return result.deleted_count > 0


class MongoUserStore(UserStore):
    """User profiles kept in one MongoDB collection, unique on email."""

    def __init__(self, collection: AsyncCollection):
        self.collection = collection

    async def ensure_indexes(self) -> None:
        await self.collection.create_index("email", unique=True)

    async def get_by_email(self, email: str) -> Optional[UserProfile]:
        async with _store_errors("get_user"):
            doc = await self.collection.find_one({"email": email}, projection=USER_PROJECTION)
        return UserProfile.from_document(doc) if doc else None

    async def upsert(self, user: UserUpsert, now: datetime) -> UpsertResult:
        async with _store_errors("upsert_user"):
            doc = await self.collection.find_one_and_update(
                {"email": user.email},
                build_user_upsert_pipeline(user, now),
                projection={"_id": 1, "updatedAt": 1},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        return UpsertResult(str(doc["_id"]), "updatedAt" not in doc)


class MongoStores(Stores):
    """Both stores sharing one client for the life of the process."""

    def __init__(self, settings: Settings):
        self.database_name = settings.database_name
        self.client = AsyncMongoClient(
            settings.build_mongo_uri(),
            server_api=ServerApi("1", strict=True, deprecation_errors=True),
            tz_aware=True,
        )
        db = self.client[settings.database_name]
        self.transactions = MongoTransactionStore(db[settings.transactions_collection])
        self.users = MongoUserStore(db[settings.users_collection])

    async def connect(self) -> None:
        try:
            await self.client.admin.command("ping")
        except PyMongoError as exc:
            # Requests will surface the failure as 500s until the cluster is reachable
            logger.warning("MongoDB ping failed", extra={"error": str(exc)})
            return
        logger.info("Connected to MongoDB", extra={"database": self.database_name})

        for store in (self.transactions, self.users):
            try:
                await store.ensure_indexes()
            except PyMongoError as exc:
                logger.warning(
                    "Could not create indexes",
                    extra={"collection": store.collection.name, "error": str(exc)},
                )

    async def close(self) -> None:
        await self.client.close()
        logger.info("MongoDB connection closed")
