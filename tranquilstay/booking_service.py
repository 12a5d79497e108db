"""
Booking lifecycle and its effect on room availability.

Every operation here runs in a single transaction on the given session: a
booking is only written together with the availability change of the room it
references, and nothing is written when either step fails.
"""

import logging
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from tranquilstay import models, schemas

logger = logging.getLogger(__name__)


class BookingError(Exception):
    """Base class for booking workflow failures."""


class RoomNotFound(BookingError):
    def __init__(self, room_id: str):
        super().__init__(f"Room {room_id} not found")
        self.room_id = room_id


class RoomUnavailable(BookingError):
    def __init__(self, room_id: str):
        super().__init__(f"Room {room_id} is not available")
        self.room_id = room_id


class BookingNotFound(BookingError):
    def __init__(self, booking_id: str):
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id


def list_bookings(db: Session, email: Optional[str] = None) -> List[models.Booking]:
    query = db.query(models.Booking)
    if email is not None:
        query = query.filter(models.Booking.email == email)
    return query.all()


def get_booking(db: Session, booking_id: str, email: Optional[str] = None) -> Optional[models.Booking]:
    query = db.query(models.Booking).filter(models.Booking.id == booking_id)
    if email is not None:
        query = query.filter(models.Booking.email == email)
    return query.first()


def create_booking(db: Session, data: schemas.BookingCreate) -> models.Booking:
    """
    Reserve the referenced room and record the booking.

    The room is claimed with a conditional update (only while it is still
    available), so of two concurrent requests for the same room exactly one
    matches a row; the other raises :class:`RoomUnavailable`.
    """
    try:
        claimed = db.execute(
            update(models.Room)
            .where(models.Room.id == data.room_id, models.Room.availability.is_(True))
            .values(availability=False)
        )
        if claimed.rowcount != 1:
            if db.get(models.Room, data.room_id) is None:
                raise RoomNotFound(data.room_id)
            raise RoomUnavailable(data.room_id)

        details = data.extra_fields()
        details.pop("roomId", None)
        details.pop("bookingId", None)
        booking = models.Booking(
            email=data.email,
            room_id=data.room_id,
            check_in=data.checkIn,
            check_out=data.checkOut,
            adults=data.adults,
            child=data.child,
            details=details,
        )
        if data.id:
            booking.id = data.id
        db.add(booking)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(booking)
    logger.info("Booking %s created for room %s by %s", booking.id, booking.room_id, booking.email)
    return booking


def update_booking(db: Session, booking_id: str, changes: schemas.BookingUpdate) -> models.Booking:
    """Overwrite the stay dates and occupancy. Room availability is untouched."""
    booking = db.get(models.Booking, booking_id)
    if booking is None:
        raise BookingNotFound(booking_id)

    booking.check_in = changes.newCheckIn
    booking.check_out = changes.newCheckOut
    booking.adults = changes.newAdults
    booking.child = changes.newChild
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(booking)
    logger.info("Booking %s updated", booking_id)
    return booking


def delete_booking(db: Session, booking_id: str) -> None:
    """Remove the booking and release its room."""
    booking = db.get(models.Booking, booking_id)
    if booking is None:
        raise BookingNotFound(booking_id)

    room_id = booking.room_id
    try:
        db.delete(booking)
        db.execute(
            update(models.Room)
            .where(models.Room.id == room_id)
            .values(availability=True)
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Booking %s deleted, room %s available again", booking_id, room_id)
