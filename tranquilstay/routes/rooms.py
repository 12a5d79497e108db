# tranquilstay/routes/rooms.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from tranquilstay import models, schemas, auth
from tranquilstay.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/rooms",
    tags=["Rooms"]
)

# Public - List All Rooms
@router.get("")
def list_rooms(db: Session = Depends(get_db)):
    return [room.to_document() for room in db.query(models.Room).all()]

# Add a Room to the listing
@router.post("", response_model=schemas.InsertResult, status_code=status.HTTP_201_CREATED)
def create_room(room: schemas.RoomCreate, db: Session = Depends(get_db)):
    if room.id and db.get(models.Room, room.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room with this id already exists.")

    new_room = models.Room(availability=room.availability, details=room.extra_fields())
    if room.id:
        new_room.id = room.id
    db.add(new_room)
    db.commit()
    db.refresh(new_room)

    logger.info("Room %s added", new_room.id)
    return {"acknowledged": True, "insertedId": new_room.id}

# Signed-in guests only - Room details; null when the id is unknown
@router.get("/{room_id}", dependencies=[Depends(auth.get_current_identity)])
def get_room(room_id: str, db: Session = Depends(get_db)):
    room = db.get(models.Room, room_id)
    return room.to_document() if room else None
