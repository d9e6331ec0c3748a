from datetime import timedelta
from unittest.mock import patch

import pytest
from jose import jwt
from starlette.requests import Request

from portfolio.services.tokens import UNAUTHORIZED_MESSAGE, IdentityClaim, TokenService

NOW = 1_700_000_000
CLAIM = IdentityClaim(user_id="65f0c0ffee0123456789abcd", username="admin", email="admin@example.com")


def make_request(authorization=None):
    headers = []
    if authorization is not None:
        headers.append((b"authorization", authorization.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


@pytest.fixture
def service():
    return TokenService("s3cr3t")


def test_requires_secret():
    with pytest.raises(ValueError):
        TokenService("")


def test_issue_then_verify(service):
    token = service.issue(CLAIM, now=NOW)

    claim = service.verify(token, now=NOW + 10)

    assert claim.user_id == CLAIM.user_id
    assert claim.username == "admin"
    assert claim.email == "admin@example.com"
    assert claim.issued_at == NOW
    assert claim.expires_at == NOW + 86400
    assert claim.issued_at <= NOW + 10 <= claim.expires_at


def test_payload_field_names(service):
    token = service.issue(CLAIM, now=NOW)
    payload = jwt.get_unverified_claims(token)
    assert set(payload) == {"userId", "username", "email", "iat", "exp"}


def test_valid_just_before_expiry(service):
    token = service.issue(CLAIM, now=NOW)
    assert service.verify(token, now=NOW + 86399) is not None


def test_invalid_just_after_expiry(service):
    token = service.issue(CLAIM, now=NOW)
    assert service.verify(token, now=NOW + 86401) is None


def test_custom_lifetime():
    service = TokenService("s3cr3t", lifetime=timedelta(minutes=5))
    token = service.issue(CLAIM, now=NOW)
    assert service.verify(token, now=NOW + 301) is None


def test_tampered_token_rejected(service):
    token = service.issue(CLAIM, now=NOW)
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[:-2] + ("AA" if signature[-2:] != "AA" else "BB")])

    assert service.verify(tampered, now=NOW) is None


def test_token_signed_with_other_secret_rejected(service):
    token = TokenService("other").issue(CLAIM, now=NOW)
    assert service.verify(token, now=NOW) is None


def test_garbage_token_rejected(service):
    assert service.verify("not-a-token", now=NOW) is None


def test_token_missing_fields_rejected(service):
    token = jwt.encode({"username": "admin", "iat": NOW, "exp": NOW + 60}, "s3cr3t", algorithm="HS256")
    assert service.verify(token, now=NOW) is None


def test_guard_accepts_bearer_token(service):
    token = service.issue(CLAIM)

    result = service.guard(make_request(f"Bearer {token}"))

    assert result.authorized is True
    assert result.claim.username == "admin"


def test_guard_rejects_missing_header(service):
    result = service.guard(make_request())
    assert result.authorized is False
    assert result.error == UNAUTHORIZED_MESSAGE


@pytest.mark.parametrize("header", ["bearer abc", "Token abc", "Bearer", "Basic YWRtaW4="])
def test_guard_skips_verification_without_bearer_prefix(service, header):
    with patch.object(service, "verify") as mock_verify:
        result = service.guard(make_request(header))

    assert result.authorized is False
    mock_verify.assert_not_called()


def test_guard_rejects_expired_token(service):
    token = service.issue(CLAIM, now=NOW - 86401)
    result = service.guard(make_request(f"Bearer {token}"))
    assert result.authorized is False
