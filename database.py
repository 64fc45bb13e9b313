"""
MongoDB access for the TravelEase API.

A ``Database`` is built once at startup by ``connect`` and handed to the
resource handlers, which each receive the single collection they own.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import bson
from bson import ObjectId
from bson.errors import BSONError
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.server_api import ServerApi

from config import Settings

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, client: MongoClient, name: str):
        self.client = client
        self.db = client[name]

    @property
    def vehicles(self) -> Collection:
        return self.db["vehicles"]

    @property
    def bookings(self) -> Collection:
        return self.db["bookings"]

    def collection_names(self) -> List[str]:
        return self.db.list_collection_names()

    def close(self) -> None:
        self.client.close()


def connect(settings: Settings) -> Database:
    """Open a client with the stable Server API and check it can reach the server."""
    client = MongoClient(
        settings.mongodb_uri,
        server_api=ServerApi("1", strict=True, deprecation_errors=True),
    )
    try:
        client.admin.command("ping")
    except Exception:
        logger.exception("Could not connect to MongoDB")
        client.close()
        raise
    logger.info("Connected to MongoDB")
    return Database(client, settings.db_name)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_object_id(value: str) -> Optional[ObjectId]:
    """Return the ObjectId for ``value`` or None if it is not a valid identifier."""
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def is_encodable(data: Dict[str, Any]) -> bool:
    """Whether ``data`` can be stored as a BSON document."""
    try:
        bson.encode(data)
    except (BSONError, OverflowError):
        return False
    return True


def _plain(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def serialize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of ``doc`` with every ObjectId, ``_id`` included, turned into a string."""
    data = _plain(dict(doc))
    if "_id" in data:
        data["_id"] = str(data["_id"])
    return data


def create_document(collection: Collection, data: Dict[str, Any], now: datetime) -> str:
    """Insert ``data`` stamped with ``createdAt`` and return the new id as a string."""
    document = dict(data)
    document["createdAt"] = now
    result = collection.insert_one(document)
    return str(result.inserted_id)
