# tranquilstay/models.py
from sqlalchemy import Column, String, Boolean, Integer, DateTime, JSON, ForeignKey
from tranquilstay.database import Base
import uuid


def new_id() -> str:
    return uuid.uuid4().hex


class DocumentMixin:
    """
    Records are stored as a handful of queried columns plus a JSON ``details``
    column holding every other field the client sent.
    """
    id = Column(String(64), primary_key=True, index=True, default=new_id)
    details = Column(JSON, nullable=False, default=dict)

    # Column attribute name -> document key
    document_fields = {}

    def to_document(self) -> dict:
        document = dict(self.details or {})
        for attr, key in self.document_fields.items():
            value = getattr(self, attr)
            # a verbatim value kept in details wins over an empty column
            if value is None and key in document:
                continue
            document[key] = value
        document["_id"] = self.id
        return document


class User(DocumentMixin, Base):
    __tablename__ = "user"
    email = Column(String, unique=True, index=True, nullable=False)
    last_login_at = Column(String, nullable=True)

    document_fields = {"email": "email", "last_login_at": "lastLoginAt"}


class Room(DocumentMixin, Base):
    __tablename__ = "rooms"
    availability = Column(Boolean, nullable=False, default=True)

    document_fields = {"availability": "availability"}


class Booking(DocumentMixin, Base):
    __tablename__ = "booking"
    email = Column(String, index=True, nullable=False)
    room_id = Column(String(64), ForeignKey("rooms.id"), index=True, nullable=False)
    check_in = Column(String, nullable=True)
    check_out = Column(String, nullable=True)
    adults = Column(Integer, nullable=True)
    child = Column(Integer, nullable=True)

    document_fields = {
        "email": "email",
        "room_id": "roomId",
        "check_in": "checkIn",
        "check_out": "checkOut",
        "adults": "adults",
        "child": "child",
    }


class Feedback(DocumentMixin, Base):
    __tablename__ = "feedback"
    booking_id = Column(String(64), index=True, nullable=False)
    timestamp = Column(DateTime, index=True, nullable=True)

    document_fields = {"booking_id": "bookingId", "timestamp": "timestamp"}
