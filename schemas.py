"""
Request and response schemas for the TravelEase API

Request bodies keep every field optional so that presence checks are done by
the resource handlers and reported with the API's own error payload.
Documents map to the MongoDB collections "vehicles" and "bookings".
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional


# Requests

class VehicleCreate(BaseModel):
    vehicleName: Optional[str] = Field(None, description="Display name of the vehicle")
    userEmail: Optional[str] = Field(None, description="Email of the owning user")
    owner: Any = Field(None, description="Owner name")
    category: Any = Field(None, description="Vehicle category")
    pricePerDay: Any = Field(None, description="Daily rental price")
    location: Any = Field(None, description="Pickup location")
    availability: Any = Field(None, description="Availability label")
    description: Any = Field(None, description="Free text description")
    coverImage: Any = Field(None, description="Cover image URL")


class VehicleUpdate(BaseModel):
    """Every field is written on update; omitted ones are stored as null."""
    vehicleName: Optional[str] = None
    owner: Any = None
    category: Any = None
    pricePerDay: Any = None
    location: Any = None
    availability: Any = None
    description: Any = None
    coverImage: Any = None


class BookingCreate(BaseModel):
    vehicleId: Optional[str] = Field(None, description="ID of the booked vehicle")
    userEmail: Optional[str] = Field(None, description="Email of the booking user")
    startDate: Optional[str] = Field(None, description="First day, ISO-8601")
    endDate: Optional[str] = Field(None, description="Last day, ISO-8601")
    status: Optional[str] = Field(None, description="Defaults to pending")


# Stored documents
#
# The collections do not enforce a schema, so stored values are passed
# through untyped and fields this API never writes are returned as well.

class VehicleDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., alias="_id")
    vehicleName: Any = None
    userEmail: Any = None
    owner: Any = None
    category: Any = None
    pricePerDay: Any = None
    location: Any = None
    availability: Any = None
    description: Any = None
    coverImage: Any = None
    createdAt: Any = None


class BookingDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., alias="_id")
    vehicleId: Any = None
    userEmail: Any = None
    startDate: Any = None
    endDate: Any = None
    status: Any = None
    createdAt: Any = None


# Responses

class VehicleCreated(BaseModel):
    success: bool = True
    message: str
    insertedId: str


class VehicleUpdated(BaseModel):
    success: bool = True
    message: str
    modifiedCount: int


class BookingCreated(BaseModel):
    success: bool = True
    message: str
    bookingId: str


class Deleted(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
