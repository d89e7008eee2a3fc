"""
Durable rotation-token store.

issue() only stages rows in the current session; callers commit so that a new
token lands in the same transaction as whatever produced it (a registration,
a login, or the revocation half of a rotation).
"""
from __future__ import annotations

import logging
from datetime import timedelta
from enum import Enum
from typing import Callable, Optional

from sqlalchemy import or_, update

from models import DBStorage, RotationToken, utcnow
from utils.security import generate_rotation_token

logger = logging.getLogger(__name__)


class RevokeOutcome(str, Enum):
    REVOKED = "REVOKED"
    NOT_FOUND = "NOT_FOUND"
    INACTIVE = "INACTIVE"


class RefreshTokenStore:
    def __init__(self, storage: DBStorage, lifetime: timedelta = timedelta(days=7),
                 clock: Callable = utcnow):
        self._storage = storage
        self.lifetime = lifetime
        self._clock = clock

    @property
    def _session(self):
        return self._storage.get_session()

    def now(self):
        return self._clock()

    def issue(self, account_id: str) -> RotationToken:
        """Stage a new token for the account and purge its stale ones."""
        now = self._clock()
        self.purge_stale(account_id, now=now)
        token = RotationToken(
            token=generate_rotation_token(),
            account_id=account_id,
            expires_at=now + self.lifetime,
            created_at=now,
        )
        self._storage.new(token)
        return token

    def lookup(self, value: str) -> Optional[RotationToken]:
        return self._session.query(RotationToken).filter(RotationToken.token == value).first()

    def mark_replaced(self, value: str, successor: Optional[str] = None, now=None) -> bool:
        """
        Revoke the token only if it is still active, recording its successor.
        The check and the write are one UPDATE, so of two concurrent callers
        exactly one sees True.
        """
        now = now or self._clock()
        result = self._session.execute(
            update(RotationToken)
            .where(
                RotationToken.token == value,
                RotationToken.revoked_at.is_(None),
                RotationToken.expires_at > now,
            )
            .values(revoked_at=now, replaced_by_token=successor)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    def revoke(self, value: str) -> RevokeOutcome:
        now = self._clock()
        token = self.lookup(value)
        if token is None:
            return RevokeOutcome.NOT_FOUND
        if not token.is_active_at(now) or not self.mark_replaced(value, None, now):
            return RevokeOutcome.INACTIVE
        self._storage.save()
        logger.info("Rotation token revoked for account %s", token.account_id)
        return RevokeOutcome.REVOKED

    def purge_stale(self, account_id: Optional[str] = None, now=None) -> int:
        """Delete expired or revoked tokens, for one account or for everyone."""
        now = now or self._clock()
        query = self._session.query(RotationToken).filter(
            or_(RotationToken.revoked_at.isnot(None), RotationToken.expires_at <= now)
        )
        if account_id is not None:
            query = query.filter(RotationToken.account_id == account_id)
        removed = query.delete(synchronize_session="fetch")
        if removed:
            logger.debug("Purged %d stale rotation tokens", removed)
        return removed
