from datetime import UTC, datetime, timedelta

from jose import jwt

from src.adapters.identity import create_identity_token, decode_identity, is_admin
from src.domain.entities import Identity

SECRET = "test-secret"


def test_round_trip_claims():
    identity = Identity(user_id="u-1", email="editor@example.org", email_verified=True)
    token = create_identity_token(identity, secret=SECRET)
    assert decode_identity(token, secret=SECRET) == identity


def test_wrong_secret_rejected():
    token = create_identity_token(Identity("u-1", "e@example.org"), secret=SECRET)
    assert decode_identity(token, secret="other") is None


def test_expired_rejected():
    token = create_identity_token(
        Identity("u-1", "e@example.org"),
        secret=SECRET,
        now_utc=datetime.now(UTC) - timedelta(hours=2),
        expires_delta=timedelta(minutes=5),
    )
    assert decode_identity(token, secret=SECRET) is None


def test_missing_email_claim_rejected():
    token = jwt.encode({"sub": "u-1"}, SECRET, algorithm="HS256")
    assert decode_identity(token, secret=SECRET) is None


def test_garbage_rejected():
    assert decode_identity("not-a-token", secret=SECRET) is None


def test_is_admin():
    verified = Identity("u", "Admin@Example.org", email_verified=True)
    unverified = Identity("u", "admin@example.org", email_verified=False)

    assert is_admin(verified, [])
    assert is_admin(verified, ["admin@example.org"])
    assert not is_admin(verified, ["someone@example.org"])
    assert not is_admin(unverified, [])
    assert is_admin(unverified, [], require_verified_email=False)
