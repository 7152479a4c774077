from datetime import timedelta

import pytest

from bitacora.app.core.exceptions import ExpiredToken, InvalidToken
from bitacora.app.security.jwt import TokenService

USER_ID = "65f1c0de0000000000000001"


class FakeClock:
    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(1_700_000_000)


@pytest.fixture
def tokens(clock):
    return TokenService("unit-secret", ttl=timedelta(hours=1), clock=clock)


def test_token_verifies_until_expiry(tokens, clock):
    token = tokens.issue(USER_ID)
    issued_at = clock.now

    assert tokens.verify(token) == USER_ID
    assert tokens.verify(token, now=issued_at + tokens.ttl_seconds - 1) == USER_ID


def test_token_expires_exactly_at_ttl(tokens, clock):
    token = tokens.issue(USER_ID)

    with pytest.raises(ExpiredToken):
        tokens.verify(token, now=clock.now + tokens.ttl_seconds)

    clock.now += tokens.ttl_seconds + 60
    with pytest.raises(ExpiredToken):
        tokens.verify(token)


def test_token_signed_with_other_secret_is_invalid(tokens, clock):
    forged = TokenService("another-secret", clock=clock).issue(USER_ID)

    with pytest.raises(InvalidToken):
        tokens.verify(forged)


@pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c"])
def test_malformed_token_is_invalid(tokens, garbage):
    with pytest.raises(InvalidToken):
        tokens.verify(garbage)


def test_expired_and_invalid_are_forbidden_errors():
    assert ExpiredToken().status_code == 403
    assert ExpiredToken().message == "Token expired"
    assert InvalidToken().message == "Invalid token"
