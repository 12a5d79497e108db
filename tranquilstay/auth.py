# tranquilstay/auth.py
from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from tranquilstay.config import Settings

TOKEN_COOKIE = "token"


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


# JWT Token Creation
def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """
    Creates a signed session token carrying the given identity claims.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def cookie_settings(settings: Settings) -> dict:
    # Cross-site cookies are only allowed by browsers when marked Secure.
    if settings.is_production:
        return {"httponly": True, "secure": True, "samesite": "none", "path": "/"}
    return {"httponly": True, "secure": False, "samesite": "strict", "path": "/"}


# JWT Token Verification
def get_current_identity(request: Request, settings: Settings = Depends(get_app_settings)) -> dict:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="unauthorized access",
    )

    token = request.cookies.get(TOKEN_COOKIE)
    if not token:
        raise credentials_exception

    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise credentials_exception

    if not payload.get("email"):
        raise credentials_exception
    return payload


def ensure_same_identity(identity: dict, email: str) -> None:
    if identity.get("email") != email:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="forbidden access",
        )


# Path-scoped identity verification (routes carrying an {email} segment)
def require_path_identity(email: str, identity: dict = Depends(get_current_identity)) -> dict:
    ensure_same_identity(identity, email)
    return identity
