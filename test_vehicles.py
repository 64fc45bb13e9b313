from unittest.mock import MagicMock

from bson import ObjectId
from pymongo.errors import PyMongoError

from results import ErrorKind, Failure, Ok
from schemas import VehicleCreate
from vehicles import VehicleHandler

VEHICLE = {
    "vehicleName": "Toyota Corolla",
    "userEmail": "owner@example.com",
    "owner": "Rahim",
    "category": "Sedan",
    "pricePerDay": 50,
    "location": "Dhaka",
    "availability": "Available",
    "description": "Clean and comfortable",
    "coverImage": "https://example.com/corolla.jpg",
}


def add_vehicle(client, **overrides):
    response = client.post("/vehicles", json={**VEHICLE, **overrides})
    assert response.status_code == 200
    return response.json()["insertedId"]


def test_create_vehicle_requires_name_and_email(client, database):
    for missing in ("vehicleName", "userEmail"):
        body = {k: v for k, v in VEHICLE.items() if k != missing}
        response = client.post("/vehicles", json=body)
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "vehicleName and userEmail are required"}

    response = client.post("/vehicles", json={**VEHICLE, "vehicleName": ""})
    assert response.status_code == 400

    response = client.post("/vehicles")
    assert response.status_code == 400

    assert database.vehicles.count_documents({}) == 0


def test_create_then_read_vehicle(client):
    response = client.post("/vehicles", json=VEHICLE)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Vehicle added successfully"
    assert ObjectId.is_valid(body["insertedId"])

    response = client.get(f"/vehicles/{body['insertedId']}")
    assert response.status_code == 200
    vehicle = response.json()
    assert vehicle["_id"] == body["insertedId"]
    assert vehicle["createdAt"] is not None
    for field, value in VEHICLE.items():
        assert vehicle[field] == value


def test_read_vehicle_invalid_and_missing_id(client):
    response = client.get("/vehicles/abc")
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid vehicle id"}

    response = client.get(f"/vehicles/{ObjectId()}")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Vehicle not found"}


def test_list_vehicles_newest_first(client):
    assert client.get("/vehicles").json() == []

    for name in ("first", "second", "third"):
        add_vehicle(client, vehicleName=name)

    vehicles = client.get("/vehicles").json()
    assert [v["vehicleName"] for v in vehicles] == ["third", "second", "first"]
    created = [v["createdAt"] for v in vehicles]
    assert created == sorted(created, reverse=True)


def test_list_my_vehicles(client):
    add_vehicle(client, vehicleName="mine-1")
    add_vehicle(client, vehicleName="other", userEmail="someone@example.com")
    add_vehicle(client, vehicleName="mine-2")

    response = client.get("/my-vehicles", params={"email": VEHICLE["userEmail"]})
    assert response.status_code == 200
    assert [v["vehicleName"] for v in response.json()] == ["mine-2", "mine-1"]

    response = client.get("/my-vehicles", params={"email": "nobody@example.com"})
    assert response.json() == []


def test_list_my_vehicles_requires_email(client):
    for params in ({}, {"email": ""}):
        response = client.get("/my-vehicles", params=params)
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Email query parameter is required"}


def test_update_overwrites_allowed_fields(client):
    vehicle_id = add_vehicle(client)

    response = client.put(f"/vehicles/{vehicle_id}", json={"vehicleName": "Toyota Axio", "pricePerDay": 70})
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Vehicle updated successfully",
        "modifiedCount": 1,
    }

    vehicle = client.get(f"/vehicles/{vehicle_id}").json()
    assert vehicle["vehicleName"] == "Toyota Axio"
    assert vehicle["pricePerDay"] == 70
    # omitted fields are cleared, not merged
    for field in ("owner", "category", "location", "availability", "description", "coverImage"):
        assert vehicle[field] is None
    # fields outside the update set keep their values
    assert vehicle["userEmail"] == VEHICLE["userEmail"]
    assert vehicle["createdAt"] is not None


def test_update_ignores_user_email(client, database):
    vehicle_id = add_vehicle(client)
    client.put(f"/vehicles/{vehicle_id}", json={**VEHICLE, "userEmail": "thief@example.com"})
    stored = database.vehicles.find_one({"_id": ObjectId(vehicle_id)})
    assert stored["userEmail"] == VEHICLE["userEmail"]


def test_update_invalid_and_missing_id(client):
    response = client.put("/vehicles/abc", json=VEHICLE)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid vehicle id"

    response = client.put(f"/vehicles/{ObjectId()}", json=VEHICLE)
    assert response.status_code == 404
    assert response.json()["error"] == "Vehicle not found"


def test_delete_vehicle(client):
    vehicle_id = add_vehicle(client)

    response = client.delete(f"/vehicles/{vehicle_id}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Vehicle deleted successfully"}

    assert client.get(f"/vehicles/{vehicle_id}").status_code == 404
    assert client.delete(f"/vehicles/{vehicle_id}").status_code == 404
    assert client.delete("/vehicles/abc").status_code == 400


def test_delete_vehicle_leaves_bookings(client, database):
    vehicle_id = add_vehicle(client)
    client.post("/bookings", json={
        "vehicleId": vehicle_id,
        "userEmail": "renter@example.com",
        "startDate": "2024-01-01",
        "endDate": "2024-01-05",
    })

    assert client.delete(f"/vehicles/{vehicle_id}").status_code == 200
    assert database.bookings.count_documents({"vehicleId": vehicle_id}) == 1


def test_database_failure_is_not_leaked(client, caplog):
    collection = MagicMock()
    collection.find.side_effect = PyMongoError("connection refused by 10.0.0.5")
    client.app.state.vehicles.collection = collection

    response = client.get("/vehicles")
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to fetch Vehicles"}
    assert "10.0.0.5" not in response.text
    assert "Error in GET /vehicles" in caplog.text


def test_handler_reports_insert_failure(clock):
    collection = MagicMock()
    collection.insert_one.side_effect = PyMongoError("write failed")
    handler = VehicleHandler(collection, clock)

    result = handler.create(VehicleCreate(vehicleName="Corolla", userEmail="owner@example.com"))
    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.INTERNAL
    assert result.status_code == 500
    assert result.message == "Failed to add vehicle"


def test_handler_validates_before_touching_collection():
    collection = MagicMock()
    handler = VehicleHandler(collection)

    assert handler.get("not-an-id").kind is ErrorKind.VALIDATION
    assert handler.create(VehicleCreate(vehicleName="Corolla")).kind is ErrorKind.VALIDATION
    assert handler.list_by_owner(None).kind is ErrorKind.VALIDATION
    collection.assert_not_called()
    assert not collection.method_calls


def test_handler_stores_only_given_fields(database, clock):
    handler = VehicleHandler(database.vehicles, clock)

    result = handler.create(VehicleCreate(vehicleName="Corolla", userEmail="owner@example.com"))
    assert isinstance(result, Ok)

    stored = database.vehicles.find_one({"_id": ObjectId(result.value.insertedId)})
    assert set(stored) == {"_id", "vehicleName", "userEmail", "createdAt"}


def test_create_rejects_values_bson_cannot_store(client, database):
    for extra in ({"pricePerDay": 2 ** 70}, {"owner": {"a\u0000b": 1}}):
        response = client.post("/vehicles", json={**VEHICLE, **extra})
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Vehicle data contains values that cannot be stored",
        }
    assert database.vehicles.count_documents({}) == 0


def test_update_rejects_values_bson_cannot_store(client, database):
    vehicle_id = add_vehicle(client)

    for extra in ({"pricePerDay": 2 ** 70}, {"description": {"a\u0000b": "x"}}):
        response = client.put(f"/vehicles/{vehicle_id}", json={**VEHICLE, **extra})
        assert response.status_code == 400
        assert response.json()["success"] is False

    stored = database.vehicles.find_one({"_id": ObjectId(vehicle_id)})
    assert stored["pricePerDay"] == VEHICLE["pricePerDay"]
    assert stored["description"] == VEHICLE["description"]


def test_documents_written_by_other_clients_are_returned(client, database):
    legacy_id = ObjectId()
    database.vehicles.insert_one({
        "vehicleName": 42,
        "userEmail": "owner@example.com",
        "pricePerDay": "50",
        "ownerRef": legacy_id,
        "tags": [legacy_id],
        "createdAt": "2023-12-31",
    })

    response = client.get("/vehicles")
    assert response.status_code == 200
    [vehicle] = response.json()
    assert vehicle["vehicleName"] == 42
    assert vehicle["pricePerDay"] == "50"
    assert vehicle["ownerRef"] == str(legacy_id)
    assert vehicle["tags"] == [str(legacy_id)]

    response = client.get(f"/vehicles/{vehicle['_id']}")
    assert response.status_code == 200
    assert response.json()["vehicleName"] == 42
