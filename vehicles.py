"""
Vehicle resource handler.

Each method validates its input, issues a single call against the
``vehicles`` collection and returns an ``Ok`` or a ``Failure``.
"""
import logging
from datetime import datetime
from typing import Callable, Optional

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from database import create_document, is_encodable, parse_object_id, serialize_document, utcnow
from results import Ok, Result, internal, invalid, not_found
from schemas import Deleted, VehicleCreate, VehicleCreated, VehicleDocument, VehicleUpdate, VehicleUpdated

logger = logging.getLogger(__name__)

INVALID_ID = "Invalid vehicle id"
NOT_FOUND = "Vehicle not found"
EMAIL_REQUIRED = "Email query parameter is required"
UNSTORABLE = "Vehicle data contains values that cannot be stored"

# Fields a PUT overwrites; anything else on the document is left alone.
UPDATABLE_FIELDS = (
    "vehicleName",
    "owner",
    "category",
    "pricePerDay",
    "location",
    "availability",
    "description",
    "coverImage",
)


class VehicleHandler:
    def __init__(self, collection: Collection, clock: Callable[[], datetime] = utcnow):
        self.collection = collection
        self.clock = clock

    def list_all(self) -> Result:
        try:
            cursor = self.collection.find().sort("createdAt", DESCENDING)
            return Ok([VehicleDocument.model_validate(serialize_document(doc)) for doc in cursor])
        except PyMongoError:
            logger.exception("Error in GET /vehicles")
            return internal("Failed to fetch Vehicles")

    def create(self, body: VehicleCreate) -> Result:
        if not body.vehicleName or not body.userEmail:
            return invalid("vehicleName and userEmail are required")

        data = body.model_dump(exclude_unset=True)
        if not is_encodable(data):
            return invalid(UNSTORABLE)

        try:
            inserted_id = create_document(self.collection, data, self.clock())
        except PyMongoError:
            logger.exception("Error in POST /vehicles")
            return internal("Failed to add vehicle")

        logger.info("Vehicle %s added for %s", inserted_id, body.userEmail)
        return Ok(VehicleCreated(message="Vehicle added successfully", insertedId=inserted_id))

    def get(self, vehicle_id: str) -> Result:
        oid = parse_object_id(vehicle_id)
        if oid is None:
            return invalid(INVALID_ID)

        try:
            doc = self.collection.find_one({"_id": oid})
        except PyMongoError:
            logger.exception("Error in GET /vehicles/%s", vehicle_id)
            return internal("Failed to fetch vehicle")

        if not doc:
            return not_found(NOT_FOUND)
        return Ok(VehicleDocument.model_validate(serialize_document(doc)))

    def list_by_owner(self, email: Optional[str]) -> Result:
        if not email:
            return invalid(EMAIL_REQUIRED)

        try:
            cursor = self.collection.find({"userEmail": email}).sort("createdAt", DESCENDING)
            return Ok([VehicleDocument.model_validate(serialize_document(doc)) for doc in cursor])
        except PyMongoError:
            logger.exception("Error in GET /my-vehicles")
            return internal("Failed to fetch user vehicles")

    def update(self, vehicle_id: str, body: VehicleUpdate) -> Result:
        oid = parse_object_id(vehicle_id)
        if oid is None:
            return invalid(INVALID_ID)

        values = body.model_dump()
        update_doc = {"$set": {field: values[field] for field in UPDATABLE_FIELDS}}
        if not is_encodable(update_doc["$set"]):
            return invalid(UNSTORABLE)

        try:
            result = self.collection.update_one({"_id": oid}, update_doc)
        except PyMongoError:
            logger.exception("Error in PUT /vehicles/%s", vehicle_id)
            return internal("Failed to update vehicle")

        if result.matched_count == 0:
            return not_found(NOT_FOUND)
        return Ok(VehicleUpdated(message="Vehicle updated successfully", modifiedCount=result.modified_count))

    def delete(self, vehicle_id: str) -> Result:
        oid = parse_object_id(vehicle_id)
        if oid is None:
            return invalid(INVALID_ID)

        try:
            result = self.collection.delete_one({"_id": oid})
        except PyMongoError:
            logger.exception("Error in DELETE /vehicles/%s", vehicle_id)
            return internal("Failed to delete vehicle")

        if result.deleted_count == 0:
            return not_found(NOT_FOUND)
        logger.info("Vehicle %s deleted", vehicle_id)
        return Ok(Deleted(message="Vehicle deleted successfully"))
