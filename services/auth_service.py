"""
Account authentication: registration, login, refresh-token rotation and
logout.

Expected failures come back as AuthResult(success=False, error=AuthError.*);
only store faults (SQLAlchemyError other than a duplicate email) propagate.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy.exc import IntegrityError

from models import Account, DBStorage, Role
from services.refresh_tokens import RefreshTokenStore, RevokeOutcome
from utils.security import TokenSigner, hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthError(str, Enum):
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_INACTIVE = "TOKEN_INACTIVE"


@dataclass
class AuthResult:
    success: bool
    error: Optional[AuthError] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    access_token_expires: Optional[datetime] = None
    account: Optional[Account] = None

    @classmethod
    def ok(cls, access_token: str, refresh_token: str, expires: datetime, account: Account) -> "AuthResult":
        return cls(True, None, access_token, refresh_token, expires, account)

    @classmethod
    def fail(cls, error: AuthError) -> "AuthResult":
        return cls(False, error)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(self, storage: DBStorage, signer: TokenSigner, tokens: RefreshTokenStore):
        self._storage = storage
        self._signer = signer
        self._tokens = tokens

    def _find_account(self, email: str) -> Optional[Account]:
        session = self._storage.get_session()
        return session.query(Account).filter(Account.email == normalize_email(email)).first()

    def _issue_pair(self, account: Account) -> AuthResult:
        """Stage a rotation token, commit, then sign the access token."""
        rotation = self._tokens.issue(account.id)
        self._storage.save()
        access_token, expires = self._signer.issue_access_token(account)
        return AuthResult.ok(access_token, rotation.token, expires, account)

    def register(self, email: str, password: str, first_name: str, last_name: str,
                 phone: Optional[str] = None) -> AuthResult:
        if self._find_account(email) is not None:
            return AuthResult.fail(AuthError.DUPLICATE_EMAIL)

        account = Account(
            email=normalize_email(email),
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=Role.USER,
            is_active=True,
        )
        self._storage.new(account)
        try:
            result = self._issue_pair(account)
        except IntegrityError:
            # lost a race with a concurrent registration of the same email
            self._storage.rollback()
            logger.info("Duplicate registration rejected by the store for %s", account.email)
            return AuthResult.fail(AuthError.DUPLICATE_EMAIL)

        logger.info("Account registered: %s", account.email)
        return result

    def login(self, email: str, password: str) -> AuthResult:
        account = self._find_account(email)
        # same error for unknown email and wrong password
        if account is None or not verify_password(password, account.password_hash):
            logger.info("Failed login for %s", normalize_email(email))
            return AuthResult.fail(AuthError.INVALID_CREDENTIALS)
        if not account.is_active:
            logger.info("Login refused for inactive account %s", account.email)
            return AuthResult.fail(AuthError.ACCOUNT_INACTIVE)

        result = self._issue_pair(account)
        logger.info("Account logged in: %s", account.email)
        return result

    def refresh_token(self, value: str) -> AuthResult:
        token = self._tokens.lookup(value)
        if token is None:
            return AuthResult.fail(AuthError.INVALID_TOKEN)

        now = self._tokens.now()
        if not token.is_active_at(now):
            return AuthResult.fail(AuthError.TOKEN_INACTIVE)

        account = token.account
        if not account.is_active:
            return AuthResult.fail(AuthError.ACCOUNT_INACTIVE)

        successor = self._tokens.issue(account.id)
        if not self._tokens.mark_replaced(value, successor.token, now):
            # another request rotated or revoked it first
            self._storage.rollback()
            return AuthResult.fail(AuthError.TOKEN_INACTIVE)
        self._storage.save()

        access_token, expires = self._signer.issue_access_token(account)
        logger.info("Token refreshed for account %s", account.email)
        return AuthResult.ok(access_token, successor.token, expires, account)

    def logout(self, value: str) -> AuthResult:
        outcome = self._tokens.revoke(value)
        if outcome is RevokeOutcome.NOT_FOUND:
            return AuthResult.fail(AuthError.INVALID_TOKEN)
        if outcome is RevokeOutcome.INACTIVE:
            return AuthResult.fail(AuthError.TOKEN_INACTIVE)
        return AuthResult(success=True)

    def revoke_token(self, value: str) -> bool:
        return self.logout(value).success
