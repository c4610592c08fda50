"""JWT validation tests."""
from datetime import timedelta

from jose import jwt

from app.core.config import settings
from app.core.security import create_access_token, decode_token
from app.core.time import utc_now


def _configure_jwt(monkeypatch, issuer: str, audience: str) -> None:
    monkeypatch.setattr(settings, "JWT_ISSUER", issuer, raising=False)
    monkeypatch.setattr(settings, "JWT_AUDIENCE", audience, raising=False)


def test_round_trip_without_issuer_or_audience(monkeypatch):
    _configure_jwt(monkeypatch, "", "")

    payload = decode_token(create_access_token({"sub": "user@example.com"}))

    assert payload is not None
    assert payload["sub"] == "user@example.com"
    assert "iss" not in payload
    assert "aud" not in payload


def test_decode_token_accepts_valid_issuer_and_audience(monkeypatch):
    issuer = "https://issuer.example.com"
    audience = "portfolio-api"
    _configure_jwt(monkeypatch, issuer, audience)

    payload = decode_token(create_access_token({"sub": "user@example.com"}))

    assert payload is not None
    assert payload["iss"] == issuer
    assert payload["aud"] == audience


def test_decode_token_rejects_wrong_issuer(monkeypatch):
    audience = "portfolio-api"
    _configure_jwt(monkeypatch, "https://issuer.example.com", audience)

    token = jwt.encode({
        "sub": "user@example.com",
        "iss": "https://wrong-issuer.example.com",
        "aud": audience,
        "exp": utc_now() + timedelta(minutes=5),
    }, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    assert decode_token(token) is None


def test_decode_token_rejects_wrong_audience(monkeypatch):
    issuer = "https://issuer.example.com"
    _configure_jwt(monkeypatch, issuer, "portfolio-api")

    token = jwt.encode({
        "sub": "user@example.com",
        "iss": issuer,
        "aud": "wrong-audience",
        "exp": utc_now() + timedelta(minutes=5),
    }, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    assert decode_token(token) is None


def test_decode_token_rejects_wrong_algorithm(monkeypatch):
    _configure_jwt(monkeypatch, "", "")

    token = jwt.encode({
        "sub": "user@example.com",
        "exp": utc_now() + timedelta(minutes=5),
    }, settings.SECRET_KEY, algorithm="HS512")

    assert decode_token(token) is None


def test_decode_token_rejects_expired(monkeypatch):
    _configure_jwt(monkeypatch, "", "")

    token = jwt.encode({
        "sub": "user@example.com",
        "exp": utc_now() - timedelta(minutes=1),
    }, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    assert decode_token(token) is None


def test_token_for_deleted_user_rejected(client, db_session, test_user):
    headers = {"Authorization": f"Bearer {create_access_token({'sub': test_user.email})}"}
    db_session.delete(test_user)
    db_session.commit()

    response = client.get("/auth/me", headers=headers)
    assert response.status_code == 401
