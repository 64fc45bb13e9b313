import itertools
from datetime import datetime, timedelta, timezone

import mongomock
import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import Database
from main import create_app


@pytest.fixture
def database():
    return Database(mongomock.MongoClient(), "travelease_test")


@pytest.fixture
def clock():
    # Each call is one second later than the previous one
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    ticks = itertools.count()
    return lambda: start + timedelta(seconds=next(ticks))


@pytest.fixture
def client(database, clock):
    app = create_app(Settings(), database=database, clock=clock)
    with TestClient(app) as test_client:
        yield test_client
