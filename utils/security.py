"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT access-token creation/verification via PyJWT
- Opaque rotation-token values and JTIs
"""
from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Tuple

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from models.account import Account

ph = PasswordHasher()

# 64 random bytes, URL-safe base64 encoded (86 chars)
ROTATION_TOKEN_BYTES = 64

REQUIRED_CLAIMS = ["sub", "email", "role", "jti", "iat", "exp", "iss", "aud"]


class InvalidAccessToken(Exception):
    """Bearer token failed signature, issuer/audience, claim or expiry checks."""


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2 (fresh salt on every call)
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2.
    Mismatches and malformed hashes both yield False.
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def generate_rotation_token() -> str:
    """Random opaque value for a rotation (refresh) token."""
    return secrets.token_urlsafe(ROTATION_TOKEN_BYTES)


class TokenSigner:
    """
    Issues and verifies short-lived HS256 access tokens.

    Secret, issuer and audience are fixed at construction; verification
    allows no clock-skew leeway.
    """

    def __init__(self, secret: str, issuer: str, audience: str,
                 access_lifetime: timedelta = timedelta(minutes=15), algorithm: str = "HS256"):
        if not secret:
            raise ValueError("TokenSigner requires a non-empty secret")
        self._secret = secret
        self.issuer = issuer
        self.audience = audience
        self.access_lifetime = access_lifetime
        self.algorithm = algorithm

    @classmethod
    def from_config(cls, config) -> "TokenSigner":
        return cls(
            secret=config["JWT_SECRET"],
            issuer=config["JWT_ISSUER"],
            audience=config["JWT_AUDIENCE"],
            access_lifetime=config["ACCESS_TOKEN_EXPIRES"],
            algorithm=config["JWT_ALGORITHM"],
        )

    def issue_access_token(self, account: Account) -> Tuple[str, datetime]:
        """Sign an access token for the account; returns (token, expiry as naive UTC)."""
        now = datetime.now(timezone.utc)
        exp = now + self.access_lifetime
        payload = {
            "iss": self.issuer,
            "aud": self.audience,
            "sub": str(account.id),
            "email": account.email,
            "given_name": account.first_name,
            "family_name": account.last_name,
            "role": account.role.value,
            "jti": generate_jti(),
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=self.algorithm)
        return token, exp.replace(tzinfo=None)

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate an access token. Raises InvalidAccessToken on bad
        signature, wrong issuer/audience, missing claims or expiry.
        """
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                leeway=0,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidAccessToken("Token expired")
        except jwt.InvalidTokenError as exc:
            raise InvalidAccessToken(f"Invalid token: {exc}")
