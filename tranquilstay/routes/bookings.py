# tranquilstay/routes/bookings.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from tranquilstay import schemas, auth, booking_service
from tranquilstay.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/booking",
    tags=["Bookings"]
)

# List All Bookings
@router.get("")
def list_all_bookings(db: Session = Depends(get_db)):
    return [booking.to_document() for booking in booking_service.list_bookings(db)]

# List a Guest's Bookings (own bookings only)
@router.get("/{email}")
def list_user_bookings(
    email: str,
    db: Session = Depends(get_db),
    identity: dict = Depends(auth.require_path_identity)
):
    logger.debug("Listing bookings for %s", identity["email"])
    return [booking.to_document() for booking in booking_service.list_bookings(db, email=email)]

# Single Booking of a Guest; null when it does not exist or belongs to someone else
@router.get("/{email}/{booking_id}", dependencies=[Depends(auth.require_path_identity)])
def get_user_booking(email: str, booking_id: str, db: Session = Depends(get_db)):
    booking = booking_service.get_booking(db, booking_id, email=email)
    return booking.to_document() if booking else None

# Book a Room (marks it unavailable)
@router.post("", response_model=schemas.InsertResult)
def create_booking(booking: schemas.BookingCreate, db: Session = Depends(get_db)):
    try:
        new_booking = booking_service.create_booking(db, booking)
    except booking_service.RoomNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    except booking_service.RoomUnavailable:
        logger.warning("Room %s already booked, rejecting booking for %s", booking.room_id, booking.email)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room is not available")
    except SQLAlchemyError:
        logger.exception("Error creating booking for room %s", booking.room_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")

    return {"acknowledged": True, "insertedId": new_booking.id}

# Change Dates / Occupants of a Booking
@router.patch("/{booking_id}", response_model=schemas.Message, dependencies=[Depends(auth.get_current_identity)])
def update_booking(booking_id: str, changes: schemas.BookingUpdate, db: Session = Depends(get_db)):
    try:
        booking_service.update_booking(db, booking_id, changes)
    except booking_service.BookingNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    except SQLAlchemyError:
        logger.exception("Error updating booking %s", booking_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")

    return {"message": "Booking updated successfully"}

# Cancel a Booking (room becomes available again)
@router.delete("/{booking_id}", response_model=schemas.Message, dependencies=[Depends(auth.get_current_identity)])
def delete_booking(booking_id: str, db: Session = Depends(get_db)):
    try:
        booking_service.delete_booking(db, booking_id)
    except booking_service.BookingNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")

    return {"message": "Booking deleted and room availability updated"}
