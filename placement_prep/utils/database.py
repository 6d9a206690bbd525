"""
MongoDB connection management and small helpers shared by the services.
"""

import logging
from contextlib import contextmanager
from typing import Any, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from ..config import settings
from .errors import StorageUnavailable

logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None


async def connect_to_db():
    """
    Open the Motor client and make sure the collection indexes exist
    """
    global _client
    _client = AsyncIOMotorClient(settings.MONGODB_URI)
    db = _client[settings.MONGODB_DB]
    try:
        await db["questions"].create_index([("category", ASCENDING), ("difficulty", ASCENDING)])
        await db["test_results"].create_index(
            [("user", ASCENDING), ("category", ASCENDING), ("submitted_at", DESCENDING)]
        )
        await db["resumes"].create_index([("user", ASCENDING), ("created_at", DESCENDING)])
        await db["users"].create_index("email", unique=True)
    except PyMongoError as e:
        logger.error(f"MongoDB index setup failed: {str(e)}")
        raise
    logger.info("MongoDB connected")


async def close_db_connection():
    global _client
    if _client is not None:
        _client.close()
        _client = None


def get_database():
    """
    FastAPI dependency returning the application database handle
    """
    if _client is None:
        raise StorageUnavailable("Database connection is not initialised")
    return _client[settings.MONGODB_DB]


@contextmanager
def storage_errors(operation: str):
    """
    Translate driver failures inside the block into StorageUnavailable
    """
    try:
        yield
    except PyMongoError as e:
        logger.error(f"{operation} failed: {str(e)}")
        raise StorageUnavailable() from e


def as_object_id(value: Any) -> Optional[ObjectId]:
    """Return value as an ObjectId, or None when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def to_public(doc: Optional[dict]) -> Optional[dict]:
    """
    Copy a stored document into its API form: `_id` becomes a string `id`
    and every ObjectId value is rendered as a string.
    """
    if doc is None:
        return None
    out = {}
    for key, value in doc.items():
        if key == "_id":
            out["id"] = str(value)
        else:
            out[key] = _stringify_ids(value)
    return out


def _stringify_ids(value):
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return to_public(value)
    if isinstance(value, list):
        return [_stringify_ids(v) for v in value]
    return value


async def attach_owners(db, docs: list) -> list:
    """
    Replace the `user` reference of each document with the owner's
    {_id, name, email}, or None when the user no longer exists.
    """
    owner_ids = list({doc["user"] for doc in docs if doc.get("user") is not None})
    owners = {}
    if owner_ids:
        with storage_errors("owner lookup"):
            users = await db["users"].find(
                {"_id": {"$in": owner_ids}},
                {"name": 1, "email": 1}
            ).to_list(length=None)
        owners = {user["_id"]: user for user in users}
    for doc in docs:
        doc["user"] = owners.get(doc.get("user"))
    return docs
