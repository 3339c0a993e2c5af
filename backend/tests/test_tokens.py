import pytest
from jose import jwt

from todo_tracker.auth import issue_token, verify_token
from todo_tracker.config import Settings
from todo_tracker.errors import InvalidTokenError, MissingTokenError

SETTINGS = Settings(jwt_secret="unit-test-secret")


def test_issue_and_verify():
    token = issue_token(SETTINGS, 7, "alice")
    claims = verify_token(SETTINGS, token)
    assert claims["id"] == 7
    assert claims["username"] == "alice"


def test_expiry_follows_ttl():
    token = issue_token(Settings(jwt_secret="s", token_ttl_hours=24), 1, "a")
    claims = jwt.get_unverified_claims(token)
    issued = issue_token(Settings(jwt_secret="s", token_ttl_hours=1), 1, "a")
    assert claims["exp"] - jwt.get_unverified_claims(issued)["exp"] >= 23 * 3600 - 5


def test_expired_token_rejected():
    token = issue_token(Settings(jwt_secret="s", token_ttl_hours=-1), 1, "a")
    with pytest.raises(InvalidTokenError):
        verify_token(Settings(jwt_secret="s"), token)


@pytest.mark.parametrize("token", [None, ""])
def test_missing_token(token):
    with pytest.raises(MissingTokenError) as exc:
        verify_token(SETTINGS, token)
    assert exc.value.status_code == 401


def test_wrong_secret():
    token = issue_token(Settings(jwt_secret="someone-else"), 1, "a")
    with pytest.raises(InvalidTokenError) as exc:
        verify_token(SETTINGS, token)
    assert exc.value.status_code == 403


def test_garbage():
    with pytest.raises(InvalidTokenError):
        verify_token(SETTINGS, "not.a.jwt")


def test_missing_id_claim():
    token = jwt.encode({"username": "a"}, SETTINGS.jwt_secret, algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        verify_token(SETTINGS, token)
