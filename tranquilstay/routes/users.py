# tranquilstay/routes/users.py
import logging

from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from tranquilstay import models, schemas
from tranquilstay.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/user",
    tags=["Users"]
)


@router.get("")
def list_users(db: Session = Depends(get_db)):
    return [user.to_document() for user in db.query(models.User).all()]


# Sign-in records a user the first time it is seen; the client checks existence first.
@router.post("", response_model=schemas.InsertResult)
def create_user(user: schemas.UserCreate, db: Session = Depends(get_db)):
    new_user = models.User(
        email=user.email,
        last_login_at=user.lastLoginAt,
        details=user.extra_fields(),
    )
    if user.id:
        new_user.id = user.id
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    db.refresh(new_user)

    logger.info("New user: %s", new_user.email)
    return {"acknowledged": True, "insertedId": new_user.id}


@router.patch("", response_model=schemas.UpdateResult)
def update_last_login(user: schemas.UserLoginUpdate, db: Session = Depends(get_db)):
    db_user = db.query(models.User).filter(models.User.email == user.email).first()
    if not db_user:
        return {"acknowledged": True, "matchedCount": 0, "modifiedCount": 0}

    modified = db_user.last_login_at != user.lastLoginAt
    db_user.last_login_at = user.lastLoginAt
    db.commit()
    return {"acknowledged": True, "matchedCount": 1, "modifiedCount": int(modified)}
