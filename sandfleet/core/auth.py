# sandfleet/core/auth.py
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from sandfleet.core.security import decode_access_token, verify_password
from sandfleet.db.session import get_db
from sandfleet.models.user import User

# OAuth2 bearer scheme for Swagger "Authorize" button and DI
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/login")


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """
    Return the user for valid credentials, otherwise None.
    Deactivated accounts are rejected with 403 so the login route can tell them apart.
    """
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user:
        # Do not reveal whether the user exists
        return None
    if not verify_password(password, user.hashed_password):
        return None
    if getattr(user, "is_active", True) is False:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="User is disabled"
        )
    return user


def user_from_token(db: Session, token: Optional[str]) -> Optional[User]:
    """Resolve an access token to an active user, or None. Used by the WebSocket route too."""
    if not token:
        return None
    try:
        payload = decode_access_token(token)
    except JWTError:
        return None
    email = payload.get("sub")
    if not email:
        return None
    user = db.query(User).filter(User.email == email).first()
    if user is None or getattr(user, "is_active", True) is False:
        return None
    return user


def get_current_user(
    request: Request,
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Decode JWT and load the user from DB or return 401.
    Stores the user id on request.state for the request logger.
    """
    user = user_from_token(db, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.user_id = user.id
    return user
