"""
RotationToken model: long-lived opaque refresh credentials.
Fields:
- token (unique random value handed to the client)
- account_id (String(36)) - FK to accounts.id
- expires_at, created_at
- revoked_at (set on logout or rotation)
- replaced_by_token (successor value when rotated; lineage for replay detection)
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class RotationToken(BaseModel, Base):
    __tablename__ = "rotation_tokens"

    token = Column(String(128), nullable=False, unique=True, index=True)
    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime, nullable=True)
    replaced_by_token = Column(String(128), nullable=True)

    account = relationship("Account", back_populates="rotation_tokens")

    def is_expired_at(self, now: datetime) -> bool:
        return now >= self.expires_at

    def is_active_at(self, now: datetime) -> bool:
        return not self.is_revoked and not self.is_expired_at(now)

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    def __repr__(self):
        # never include the token value
        return f"<RotationToken id={self.id} account_id={self.account_id}>"
