"""
Booking resource handler.

Bookings are not checked against the vehicles collection and overlapping
date ranges for the same vehicle are accepted.
"""
import logging
from datetime import date, datetime, time, timezone
from typing import Callable, Optional

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from database import create_document, is_encodable, parse_object_id, serialize_document, utcnow
from results import Ok, Result, internal, invalid, not_found
from schemas import BookingCreate, BookingCreated, BookingDocument, Deleted

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "pending"


def parse_day(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 date or datetime into midnight UTC of its UTC day.

    Datetimes without an offset are taken as UTC.

    Returns None when the value cannot be parsed.
    """
    try:
        day = date.fromisoformat(value)
    except ValueError:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(value)
        except ValueError:
            return None
        if moment.tzinfo is not None:
            moment = moment.astimezone(timezone.utc)
        day = moment.date()
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


class BookingHandler:
    def __init__(self, collection: Collection, clock: Callable[[], datetime] = utcnow):
        self.collection = collection
        self.clock = clock

    def create(self, body: BookingCreate) -> Result:
        if not (body.vehicleId and body.userEmail and body.startDate and body.endDate):
            return invalid("vehicleId, userEmail, startDate and endDate are required")

        start = parse_day(body.startDate)
        end = parse_day(body.endDate)
        if start is None or end is None:
            return invalid("startDate and endDate must be valid dates")

        booking = {
            "vehicleId": body.vehicleId,
            "userEmail": body.userEmail,
            "startDate": start,
            "endDate": end,
            "status": body.status or DEFAULT_STATUS,
        }
        if not is_encodable(booking):
            return invalid("Booking data contains values that cannot be stored")

        try:
            booking_id = create_document(self.collection, booking, self.clock())
        except PyMongoError:
            logger.exception("Error in POST /bookings")
            return internal("Failed to create booking")

        logger.info("Booking %s created for vehicle %s", booking_id, body.vehicleId)
        return Ok(BookingCreated(message="Booking created successfully", bookingId=booking_id))

    def list_by_user(self, email: Optional[str]) -> Result:
        if not email:
            return invalid("Email query parameter is required")

        try:
            cursor = self.collection.find({"userEmail": email}).sort("createdAt", DESCENDING)
            return Ok([BookingDocument.model_validate(serialize_document(doc)) for doc in cursor])
        except PyMongoError:
            logger.exception("Error in GET /my-bookings")
            return internal("Failed to fetch user bookings")

    def delete(self, booking_id: str) -> Result:
        oid = parse_object_id(booking_id)
        if oid is None:
            return invalid("Invalid booking id")

        try:
            result = self.collection.delete_one({"_id": oid})
        except PyMongoError:
            logger.exception("Error in DELETE /bookings/%s", booking_id)
            return internal("Failed to delete booking")

        if result.deleted_count == 0:
            return not_found("Booking not found")
        logger.info("Booking %s deleted", booking_id)
        return Ok(Deleted(message="Booking deleted successfully"))
