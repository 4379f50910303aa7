from datetime import datetime, timedelta, timezone

import jwt
import pytest

from domain.common.exceptions import InvalidCredentialsException, InvalidTokenException
from domain.user.entity import UserIdentity


def test_login_accepts_any_non_empty_pair(token_service):
    result = token_service.login("carol", "anything")
    identity = token_service.verify_access_token(result.token)
    assert identity == UserIdentity(id=1, username="carol", email="carol@example.com")
    assert result.user.model_dump() == {"username": "carol", "id": 1}


@pytest.mark.parametrize("username,password", [("", "pw"), ("carol", ""), (None, "pw"), ("carol", None)])
def test_login_rejects_empty_values(token_service, username, password):
    with pytest.raises(InvalidCredentialsException) as exc_info:
        token_service.login(username, password)
    assert exc_info.value.message == "Username and password required"


def test_expired_token_is_invalid(token_service):
    issued = datetime.now(timezone.utc) - timedelta(hours=25)
    token = token_service.create_access_token(UserIdentity.for_username("dave"), now=issued)
    with pytest.raises(InvalidTokenException) as exc_info:
        token_service.verify_access_token(token)
    assert exc_info.value.message == "Authentication error: Invalid token"
    assert exc_info.value.details == {"reason": "expired"}


def test_token_from_other_secret_is_invalid(token_service):
    token = jwt.encode({"id": 1, "username": "eve", "email": "eve@example.com"}, "wrong", algorithm="HS256")
    with pytest.raises(InvalidTokenException):
        token_service.verify_access_token(token)


def test_garbage_token_is_invalid(token_service):
    with pytest.raises(InvalidTokenException):
        token_service.verify_access_token("not-a-jwt")


def test_token_missing_identity_claims_is_invalid(token_service, settings):
    token = jwt.encode({"sub": "1"}, settings.JWT_SECRET, algorithm="HS256")
    with pytest.raises(InvalidTokenException):
        token_service.verify_access_token(token)


def test_invalid_token_keeps_decode_error_as_cause(token_service):
    with pytest.raises(InvalidTokenException) as exc_info:
        token_service.verify_access_token("not-a-jwt")
    assert isinstance(exc_info.value.__cause__, jwt.InvalidTokenError)


def test_expired_token_hides_decode_traceback(token_service):
    issued = datetime.now(timezone.utc) - timedelta(hours=25)
    token = token_service.create_access_token(UserIdentity.for_username("dave"), now=issued)
    with pytest.raises(InvalidTokenException) as exc_info:
        token_service.verify_access_token(token)
    assert exc_info.value.__suppress_context__ is True
