import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.errors import PyMongoError

from bookings import BookingHandler
from config import Settings
from database import Database, connect, utcnow
from logging_config import setup_logging
from results import Failure, Result
from schemas import (
    BookingCreate,
    BookingCreated,
    BookingDocument,
    Deleted,
    ErrorResponse,
    VehicleCreate,
    VehicleCreated,
    VehicleDocument,
    VehicleUpdate,
    VehicleUpdated,
)
from vehicles import VehicleHandler

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

router = APIRouter()


def get_vehicle_handler(request: Request) -> VehicleHandler:
    return request.app.state.vehicles


def get_booking_handler(request: Request) -> BookingHandler:
    return request.app.state.bookings


def respond(result: Result):
    """Turn a handler outcome into the HTTP response."""
    if isinstance(result, Failure):
        return JSONResponse(
            status_code=result.status_code,
            content=ErrorResponse(error=result.message).model_dump(),
        )
    return result.value


@router.get("/", response_class=PlainTextResponse)
def read_root():
    return "TravelEase server is running 🚗"


@router.get("/test")
def test_database(request: Request):
    database: Database = request.app.state.database
    response = {"backend": "✅ Running", "database": "✅ Connected"}
    try:
        response["collections"] = database.collection_names()
    except PyMongoError as e:
        response["database"] = f"⚠️ {str(e)[:50]}"
    return response


# Vehicles

@router.get("/vehicles", response_model=List[VehicleDocument], responses=ERROR_RESPONSES)
def list_vehicles(handler: VehicleHandler = Depends(get_vehicle_handler)):
    return respond(handler.list_all())


@router.post("/vehicles", response_model=VehicleCreated, responses=ERROR_RESPONSES)
def create_vehicle(
    body: Optional[VehicleCreate] = None,
    handler: VehicleHandler = Depends(get_vehicle_handler),
):
    return respond(handler.create(body or VehicleCreate()))


@router.get("/vehicles/{vehicle_id}", response_model=VehicleDocument, responses=ERROR_RESPONSES)
def get_vehicle(vehicle_id: str, handler: VehicleHandler = Depends(get_vehicle_handler)):
    return respond(handler.get(vehicle_id))


@router.get("/my-vehicles", response_model=List[VehicleDocument], responses=ERROR_RESPONSES)
def list_my_vehicles(
    email: Optional[str] = None,
    handler: VehicleHandler = Depends(get_vehicle_handler),
):
    return respond(handler.list_by_owner(email))


@router.put("/vehicles/{vehicle_id}", response_model=VehicleUpdated, responses=ERROR_RESPONSES)
def update_vehicle(
    vehicle_id: str,
    body: Optional[VehicleUpdate] = None,
    handler: VehicleHandler = Depends(get_vehicle_handler),
):
    return respond(handler.update(vehicle_id, body or VehicleUpdate()))


@router.delete("/vehicles/{vehicle_id}", response_model=Deleted, responses=ERROR_RESPONSES)
def delete_vehicle(vehicle_id: str, handler: VehicleHandler = Depends(get_vehicle_handler)):
    return respond(handler.delete(vehicle_id))


# Bookings

@router.post("/bookings", response_model=BookingCreated, responses=ERROR_RESPONSES)
def create_booking(
    body: Optional[BookingCreate] = None,
    handler: BookingHandler = Depends(get_booking_handler),
):
    return respond(handler.create(body or BookingCreate()))


@router.get("/my-bookings", response_model=List[BookingDocument], responses=ERROR_RESPONSES)
def list_my_bookings(
    email: Optional[str] = None,
    handler: BookingHandler = Depends(get_booking_handler),
):
    return respond(handler.list_by_user(email))


@router.delete("/bookings/{booking_id}", response_model=Deleted, responses=ERROR_RESPONSES)
def delete_booking(booking_id: str, handler: BookingHandler = Depends(get_booking_handler)):
    return respond(handler.delete(booking_id))


async def invalid_request_handler(request: Request, exc: RequestValidationError):
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content=ErrorResponse(error="Invalid request body").model_dump())


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    clock: Callable[[], datetime] = utcnow,
) -> FastAPI:
    """Build the API.

    When ``database`` is given it is used as is and left open on shutdown;
    otherwise a client is connected from ``settings`` during startup.
    """
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, settings.log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = database if database is not None else await run_in_threadpool(connect, settings)
        app.state.database = db
        app.state.vehicles = VehicleHandler(db.vehicles, clock)
        app.state.bookings = BookingHandler(db.bookings, clock)
        logger.info("Server is running on port %s", settings.port)
        try:
            yield
        finally:
            if database is None:
                db.close()

    app = FastAPI(title="TravelEase API", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, invalid_request_handler)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
