import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from tranquilstay import booking_service, models, schemas
from tranquilstay.main import create_app

GUEST = "a@tranquil.io"


def booking_payload(room_id="R1", email=GUEST, **fields):
    payload = {
        "bookingId": room_id,
        "email": email,
        "checkIn": "2024-01-01",
        "checkOut": "2024-01-03",
        "adults": 2,
        "child": 0,
    }
    payload.update(fields)
    return payload


def get_room(db, room_id):
    db.expire_all()
    return db.get(models.Room, room_id)


def test_create_booking_marks_room_unavailable(client, db, room):
    room("R1")
    response = client.post("/booking", json=booking_payload(roomName="Ocean Suite"))
    assert response.status_code == 200
    booking_id = response.json()["insertedId"]

    assert get_room(db, "R1").availability is False
    bookings = client.get("/booking").json()
    assert bookings == [{
        "_id": booking_id,
        "email": GUEST,
        "roomId": "R1",
        "checkIn": "2024-01-01",
        "checkOut": "2024-01-03",
        "adults": 2,
        "child": 0,
        "roomName": "Ocean Suite",
    }]


def test_create_booking_accepts_room_id_key(client, db, room):
    room("R1")
    payload = booking_payload()
    payload["roomId"] = payload.pop("bookingId")
    assert client.post("/booking", json=payload).status_code == 200
    assert get_room(db, "R1").availability is False


def test_booking_unknown_room_writes_nothing(client):
    response = client.post("/booking", json=booking_payload("missing"))
    assert response.status_code == 404
    assert response.json() == {"message": "Room not found"}
    assert client.get("/booking").json() == []


def test_second_booking_for_same_room_conflicts(client, db, room):
    room("R1")
    first = client.post("/booking", json=booking_payload(email="a@tranquil.io"))
    second = client.post("/booking", json=booking_payload(email="b@tranquil.io"))

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json() == {"message": "Room is not available"}
    assert [b["email"] for b in client.get("/booking").json()] == ["a@tranquil.io"]
    assert get_room(db, "R1").availability is False


def test_list_bookings_for_owner_only(client, login, room):
    room("R1")
    room("R2")
    client.post("/booking", json=booking_payload("R1", email="a@tranquil.io"))
    client.post("/booking", json=booking_payload("R2", email="b@tranquil.io"))

    login("a@tranquil.io")
    response = client.get("/booking/a@tranquil.io")
    assert response.status_code == 200
    assert [b["roomId"] for b in response.json()] == ["R1"]


def test_get_single_booking(client, login, room):
    room("R1")
    room("R2")
    own = client.post("/booking", json=booking_payload("R1", email="a@tranquil.io")).json()["insertedId"]
    other = client.post("/booking", json=booking_payload("R2", email="b@tranquil.io")).json()["insertedId"]

    login("a@tranquil.io")
    response = client.get(f"/booking/a@tranquil.io/{own}")
    assert response.status_code == 200
    assert response.json()["_id"] == own

    # someone else's booking is not visible through your own path
    assert client.get(f"/booking/a@tranquil.io/{other}").json() is None


def test_update_booking(client, db, login, room):
    room("R1")
    booking_id = client.post("/booking", json=booking_payload()).json()["insertedId"]
    login(GUEST)

    response = client.patch(f"/booking/{booking_id}", json={
        "newCheckIn": "2024-02-10",
        "newCheckOut": "2024-02-12",
        "newAdults": 1,
        "newChild": 1,
    })
    assert response.status_code == 200
    assert response.json() == {"message": "Booking updated successfully"}

    booking = client.get(f"/booking/{GUEST}/{booking_id}").json()
    assert (booking["checkIn"], booking["checkOut"], booking["adults"], booking["child"]) == (
        "2024-02-10", "2024-02-12", 1, 1,
    )
    assert get_room(db, "R1").availability is False


def test_update_unknown_booking_is_not_found(client, login):
    login(GUEST)
    response = client.patch("/booking/missing", json={"newCheckIn": "2024-02-10"})
    assert response.status_code == 404
    assert response.json() == {"message": "Booking not found"}
    assert client.get("/booking").json() == []


def test_update_requires_login(client, room):
    room("R1")
    booking_id = client.post("/booking", json=booking_payload()).json()["insertedId"]
    assert client.patch(f"/booking/{booking_id}", json={}).status_code == 401


def test_delete_booking_releases_room(client, db, login, room):
    room("R1")
    booking_id = client.post("/booking", json=booking_payload()).json()["insertedId"]
    login(GUEST)

    response = client.delete(f"/booking/{booking_id}")
    assert response.status_code == 200
    assert response.json() == {"message": "Booking deleted and room availability updated"}
    assert client.get("/booking").json() == []
    assert get_room(db, "R1").availability is True

    # the room can be booked again
    assert client.post("/booking", json=booking_payload()).status_code == 200


def test_delete_unknown_booking_is_not_found(client, login):
    login(GUEST)
    response = client.delete("/booking/missing")
    assert response.status_code == 404
    assert response.json() == {"message": "Booking not found"}


class TestBookingService:

    def seed_room(self, db, room_id="R1", availability=True):
        db.add(models.Room(id=room_id, availability=availability, details={}))
        db.commit()

    def test_unavailable_room_raises_and_writes_nothing(self, db):
        self.seed_room(db, availability=False)
        data = schemas.BookingCreate.model_validate(booking_payload())
        with pytest.raises(booking_service.RoomUnavailable):
            booking_service.create_booking(db, data)
        assert db.query(models.Booking).count() == 0

    def test_unknown_room_raises(self, db):
        data = schemas.BookingCreate.model_validate(booking_payload("nowhere"))
        with pytest.raises(booking_service.RoomNotFound):
            booking_service.create_booking(db, data)

    def test_delete_unknown_booking_raises(self, db):
        with pytest.raises(booking_service.BookingNotFound):
            booking_service.delete_booking(db, "missing")

    def test_list_filters_by_email(self, db):
        self.seed_room(db, "R1")
        self.seed_room(db, "R2")
        booking_service.create_booking(db, schemas.BookingCreate.model_validate(booking_payload("R1", email="a@tranquil.io")))
        booking_service.create_booking(db, schemas.BookingCreate.model_validate(booking_payload("R2", email="b@tranquil.io")))

        assert len(booking_service.list_bookings(db)) == 2
        assert [b.room_id for b in booking_service.list_bookings(db, email="b@tranquil.io")] == ["R2"]


def test_concurrent_bookings_for_one_room_yield_single_success(tmp_path, settings):
    file_settings = settings.model_copy(update={"DATABASE_URL": f"sqlite:///{tmp_path / 'stay.db'}"})
    app = create_app(file_settings)
    guests = 8
    barrier = threading.Barrier(guests)

    with TestClient(app) as client:
        assert client.post("/rooms", json={"_id": "R1"}).status_code == 201

        def book(n):
            barrier.wait()
            return client.post("/booking", json=booking_payload(email=f"guest{n}@tranquil.io")).status_code

        with ThreadPoolExecutor(max_workers=guests) as pool:
            statuses = sorted(pool.map(book, range(guests)))

        assert statuses == [200] + [409] * (guests - 1)
        assert len(client.get("/booking").json()) == 1
        assert client.get("/rooms").json()[0]["availability"] is False


def test_failed_booking_insert_releases_room_claim(client, db, room):
    room("R1")
    room("R2")
    assert client.post("/booking", json=booking_payload("R1", _id="B1")).status_code == 200

    # same booking id again: the insert fails after R2 was claimed
    response = client.post("/booking", json=booking_payload("R2", _id="B1"))
    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}
    assert get_room(db, "R2").availability is True
    assert [b["roomId"] for b in client.get("/booking").json()] == ["R1"]


def test_update_booking_store_failure_is_internal_error(client, login, room, monkeypatch):
    room("R1")
    booking_id = client.post("/booking", json=booking_payload()).json()["insertedId"]
    login(GUEST)

    def failing_commit(self):
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(Session, "commit", failing_commit)
    response = client.patch(f"/booking/{booking_id}", json={"newCheckIn": "2024-03-01"})
    monkeypatch.undo()

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}
    assert client.get(f"/booking/{GUEST}/{booking_id}").json()["checkIn"] == "2024-01-01"
