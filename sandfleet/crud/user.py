# sandfleet/crud/user.py
from typing import Optional

from sqlalchemy.orm import Session

from sandfleet.core.security import get_password_hash
from sandfleet.models.user import USER_ROLES, User


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def create_user(
    db: Session,
    *,
    email: str,
    password: str,
    role: str = "viewer",
    full_name: Optional[str] = None,
) -> User:
    if role not in USER_ROLES:
        raise ValueError(f"Unknown role: {role}")
    obj = User(
        email=email.strip().lower(),
        hashed_password=get_password_hash(password),
        role=role,
        full_name=full_name,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj
