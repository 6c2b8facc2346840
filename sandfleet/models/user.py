# sandfleet/models/user.py
from sqlalchemy import Boolean, Column, DateTime, Integer, String, text

from sandfleet.db.base import Base, utcnow

# viewer = read-only officer; operator/admin may write
USER_ROLES = {"viewer", "operator", "admin"}
WRITE_ROLES = {"operator", "admin"}


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)

    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    full_name = Column(String(255), nullable=True)

    role = Column(String(20), nullable=False, default="viewer", index=True)
    is_active = Column(Boolean, nullable=False, server_default=text("1"))

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"
