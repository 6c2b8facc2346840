# sandfleet/api/v1/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from sandfleet.core.auth import authenticate_user, get_current_user
from sandfleet.core.security import create_access_token
from sandfleet.db.session import get_db
from sandfleet.models.user import User
from sandfleet.schemas.user import Token, UserOut

router = APIRouter()

log = logging.getLogger("sandfleet.request")


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    email = (form_data.username or "").strip()

    user = authenticate_user(db, email, form_data.password)
    if not user:
        log.warning("login failed email=%s", email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(user.email, extra={"role": user.role})
    return Token(access_token=access_token)


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
