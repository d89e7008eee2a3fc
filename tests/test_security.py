"""Tests for password hashing and access-token signing."""

from datetime import timedelta

import jwt
import pytest

from models import Account, Role
from utils.security import (
    InvalidAccessToken,
    TokenSigner,
    generate_rotation_token,
    hash_password,
    verify_password,
)

SECRET = "unit-test-secret-with-at-least-32-bytes"


def make_account(**overrides):
    values = dict(
        email="a@b.kz",
        password_hash="x",
        first_name="Aigerim",
        last_name="Sadykova",
        role=Role.USER,
    )
    values.update(overrides)
    return Account(**values)


def make_signer(**overrides):
    values = dict(secret=SECRET, issuer="issuer", audience="clients")
    values.update(overrides)
    return TokenSigner(**values)


class TestPasswordHashing:
    def test_verify_accepts_own_hash(self):
        assert verify_password("secret1", hash_password("secret1"))

    def test_verify_rejects_other_password(self):
        assert not verify_password("secret2", hash_password("secret1"))

    def test_hash_is_salted(self):
        assert hash_password("secret1") != hash_password("secret1")

    @pytest.mark.parametrize("digest", [
        "",
        "not-a-hash",
        "$2b$12$abcdefghijklmnopqrstuv",
        "$argon2id$v=19$m=65536,t=3,p=4$garbage",
    ])
    def test_malformed_digest_returns_false(self, digest):
        assert verify_password("secret1", digest) is False


class TestTokenSigner:
    def test_issue_and_decode_round_trip(self):
        signer = make_signer()
        account = make_account()
        token, expires = signer.issue_access_token(account)

        claims = signer.decode_access_token(token)
        assert claims["sub"] == account.id
        assert claims["email"] == "a@b.kz"
        assert claims["given_name"] == "Aigerim"
        assert claims["family_name"] == "Sadykova"
        assert claims["role"] == "User"
        assert claims["iss"] == "issuer"
        assert claims["aud"] == "clients"
        assert expires.tzinfo is None

    def test_default_lifetime_is_fifteen_minutes(self):
        signer = make_signer()
        token, _ = signer.issue_access_token(make_account())
        claims = signer.decode_access_token(token)
        assert claims["exp"] - claims["iat"] == 15 * 60

    def test_each_token_has_unique_jti(self):
        signer = make_signer()
        account = make_account()
        first = signer.decode_access_token(signer.issue_access_token(account)[0])
        second = signer.decode_access_token(signer.issue_access_token(account)[0])
        assert first["jti"] != second["jti"]

    def test_wrong_secret_rejected(self):
        token, _ = make_signer().issue_access_token(make_account())
        with pytest.raises(InvalidAccessToken):
            make_signer(secret="another-secret-with-at-least-32-bytes").decode_access_token(token)

    def test_wrong_audience_rejected(self):
        token, _ = make_signer().issue_access_token(make_account())
        with pytest.raises(InvalidAccessToken):
            make_signer(audience="someone-else").decode_access_token(token)

    def test_wrong_issuer_rejected(self):
        token, _ = make_signer().issue_access_token(make_account())
        with pytest.raises(InvalidAccessToken):
            make_signer(issuer="someone-else").decode_access_token(token)

    def test_expired_token_rejected_without_leeway(self):
        signer = make_signer(access_lifetime=timedelta(seconds=-1))
        token, _ = signer.issue_access_token(make_account())
        with pytest.raises(InvalidAccessToken, match="expired"):
            signer.decode_access_token(token)

    def test_missing_claims_rejected(self):
        token = jwt.encode({"sub": "x", "iss": "issuer", "aud": "clients"}, SECRET, algorithm="HS256")
        with pytest.raises(InvalidAccessToken):
            make_signer().decode_access_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(InvalidAccessToken):
            make_signer().decode_access_token("not.a.jwt")

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            TokenSigner(secret="", issuer="i", audience="a")


def test_rotation_token_has_64_bytes_of_entropy():
    value = generate_rotation_token()
    # 64 bytes -> 86 URL-safe base64 characters, no padding
    assert len(value) == 86
    assert value != generate_rotation_token()
