# tranquilstay/routes/feedback.py
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from tranquilstay import models, schemas, auth
from tranquilstay.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/feedback",
    tags=["Feedback"]
)

_datetime = TypeAdapter(datetime)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO strings and epoch numbers become naive UTC datetimes; anything else gives None."""
    if value is None:
        return None
    try:
        parsed = _datetime.validate_python(value)
    except ValidationError:
        return None
    # Stored as naive UTC so that mixed offsets still sort correctly.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed

# All Feedback, newest first
@router.get("")
def list_feedback(db: Session = Depends(get_db)):
    feedback = db.query(models.Feedback).order_by(models.Feedback.timestamp.desc().nullslast()).all()
    return [item.to_document() for item in feedback]

# Feedback left on one Booking (booking owner only)
@router.get("/{booking_id}")
def list_booking_feedback(
    booking_id: str,
    db: Session = Depends(get_db),
    identity: dict = Depends(auth.get_current_identity)
):
    booking = db.get(models.Booking, booking_id)
    if booking is None:
        return []
    auth.ensure_same_identity(identity, booking.email)

    feedback = db.query(models.Feedback).filter(models.Feedback.booking_id == booking_id).all()
    return [item.to_document() for item in feedback]

# Leave Feedback after a stay
@router.post("", status_code=status.HTTP_201_CREATED)
def create_feedback(feedback: schemas.FeedbackCreate, db: Session = Depends(get_db)):
    details = feedback.extra_fields()
    timestamp = parse_timestamp(feedback.timestamp)
    if timestamp is None and feedback.timestamp is not None:
        logger.warning("Unparsable feedback timestamp %r kept as sent", feedback.timestamp)
        details["timestamp"] = feedback.timestamp

    new_feedback = models.Feedback(
        booking_id=feedback.bookingId,
        timestamp=timestamp,
        details=details,
    )
    if feedback.id:
        new_feedback.id = feedback.id
    try:
        db.add(new_feedback)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error inserting feedback for booking %s", feedback.bookingId)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal Server Error")

    logger.info("Feedback %s added for booking %s", new_feedback.id, feedback.bookingId)
    return {"insertedId": new_feedback.id}
