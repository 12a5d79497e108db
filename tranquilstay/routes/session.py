# tranquilstay/routes/session.py
import logging

from fastapi import APIRouter, Depends, Response
from tranquilstay import schemas, auth
from tranquilstay.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Session"])


# Issue the session cookie for a signed-in identity
@router.post("/jwt")
def issue_token(identity: schemas.SessionIdentity, response: Response, settings: Settings = Depends(auth.get_app_settings)):
    token = auth.create_access_token(identity.model_dump(), settings)
    response.set_cookie(auth.TOKEN_COOKIE, token, **auth.cookie_settings(settings))
    logger.info("Session token issued for %s", identity.email)
    return {"success": True}


@router.get("/logout")
def logout(response: Response, settings: Settings = Depends(auth.get_app_settings)):
    response.delete_cookie(auth.TOKEN_COOKIE, **auth.cookie_settings(settings))
    logger.info("Session cookie cleared")
    return {"success": True}
