# tranquilstay/schemas.py
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator
from pydantic.networks import validate_email
from typing import Any, Optional


class Document(BaseModel):
    """Base for request bodies that keep unknown keys as document fields."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(default=None, alias="_id")

    def extra_fields(self) -> dict:
        return dict(self.model_extra or {})


class SessionIdentity(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: str


def check_email(value: str) -> str:
    # Validated, but kept exactly as sent so it matches token identities and bookings.
    validate_email(value)
    return value


class UserCreate(Document):
    email: str
    lastLoginAt: Optional[str] = None

    @field_validator("email")
    @classmethod
    def email_is_valid(cls, value: str) -> str:
        return check_email(value)


class UserLoginUpdate(BaseModel):
    email: str
    lastLoginAt: Optional[str] = None

    @field_validator("email")
    @classmethod
    def email_is_valid(cls, value: str) -> str:
        return check_email(value)


class RoomCreate(Document):
    availability: bool = True


class BookingCreate(Document):
    email: str
    # Older clients send the room reference as "bookingId".
    room_id: str = Field(validation_alias=AliasChoices("roomId", "bookingId"))
    checkIn: Optional[str] = None
    checkOut: Optional[str] = None
    adults: Optional[int] = None
    child: Optional[int] = None


class BookingUpdate(BaseModel):
    newCheckIn: Optional[str] = None
    newCheckOut: Optional[str] = None
    newAdults: Optional[int] = None
    newChild: Optional[int] = None


class FeedbackCreate(Document):
    bookingId: str
    # Parsed by the route; values that are not dates are kept verbatim.
    timestamp: Optional[Any] = None


class InsertResult(BaseModel):
    acknowledged: bool = True
    insertedId: str


class UpdateResult(BaseModel):
    acknowledged: bool = True
    matchedCount: int
    modifiedCount: int


class Message(BaseModel):
    message: str
