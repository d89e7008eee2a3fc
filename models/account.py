from enum import Enum

from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from models.base_model import BaseModel, Base, utcnow


class Role(str, Enum):
    USER = "User"
    ADMIN = "Admin"


class Account(BaseModel, Base):
    __tablename__ = "accounts"

    # Stored lowercase; uniqueness enforced here
    email = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=True)
    role = Column(SAEnum(Role, name="account_role", native_enum=False), nullable=False, default=Role.USER)
    is_active = Column(Boolean, nullable=False, default=True)
    updated_at = Column(DateTime, nullable=True, onupdate=utcnow)

    rotation_tokens = relationship(
        "RotationToken",
        back_populates="account",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Account id={self.id} email={self.email}>"
