# backend/tests/test_auth.py
# Identité : JWT du fournisseur d'identité, claim `sub` = identifiant utilisateur.

import datetime as dt

import pytest
from jose import JWTError, jwt

from bookit.core.security import decode_user_id
from bookit.core.settings import get_settings

settings = get_settings()

TEST_USER_ID = "689ee343223844287350eed9"


def _token(claims: dict, key: str = None) -> str:
    return jwt.encode(claims, key or settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def _valid_claims(**extra) -> dict:
    exp = dt.datetime.now(dt.timezone.utc) + dt.timedelta(minutes=15)
    return {"sub": TEST_USER_ID, "exp": exp, **extra}


def test_decode_valid_token():
    assert decode_user_id(_token(_valid_claims()), settings) == TEST_USER_ID


def test_decode_wrong_signature():
    with pytest.raises(JWTError):
        decode_user_id(_token(_valid_claims(), key="another-secret"), settings)


def test_decode_expired_token():
    expired = _valid_claims(exp=dt.datetime.now(dt.timezone.utc) - dt.timedelta(days=1))
    with pytest.raises(JWTError):
        decode_user_id(_token(expired), settings)


def test_decode_token_without_sub():
    claims = _valid_claims()
    claims.pop("sub")
    with pytest.raises(JWTError):
        decode_user_id(_token(claims), settings)


def test_bearer_token_resolves_profile(anonymous_client):
    r = anonymous_client.get(
        "/my/profile", headers={"Authorization": f"Bearer {_token(_valid_claims())}"}
    )
    print("response", r.json())
    assert r.status_code == 200
    assert r.json()["_id"] == TEST_USER_ID


def test_invalid_bearer_token(anonymous_client):
    fake_token = "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.abc.def"
    r = anonymous_client.get("/my/profile", headers={"Authorization": f"Bearer {fake_token}"})
    print("response", r.json())
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"


def test_missing_token(anonymous_client):
    r = anonymous_client.get("/my/reading-log")
    assert r.status_code == 401
