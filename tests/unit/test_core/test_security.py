"""Unit tests for admin authentication helpers."""
import jwt
import pytest
from datetime import timedelta
from fastapi import HTTPException
from unittest.mock import Mock, patch

from eventsync.core import config
from eventsync.core.security import (
    create_access_token,
    get_password_hash,
    verify_admin_credentials,
    verify_admin_token,
    verify_password,
)


def _request_with_cookie(token):
    request = Mock()
    request.cookies = {"admin_token": token} if token else {}
    return request


@pytest.mark.unit
class TestPasswordHashing:

    def test_hash_and_verify(self):
        password_hash = get_password_hash("correct horse")
        assert password_hash.startswith("$argon2")
        assert verify_password("correct horse", password_hash)
        assert not verify_password("wrong", password_hash)


@pytest.mark.unit
class TestAdminCredentials:

    def test_plaintext_password(self):
        with patch.object(config.settings, "ADMIN_USERNAME", "admin"), \
                patch.object(config.settings, "ADMIN_PASSWORD", "s3cret"):
            assert verify_admin_credentials("admin", "s3cret")
            assert not verify_admin_credentials("admin", "nope")
            assert not verify_admin_credentials("root", "s3cret")

    def test_hashed_password(self):
        hashed = get_password_hash("s3cret")
        with patch.object(config.settings, "ADMIN_USERNAME", "admin"), \
                patch.object(config.settings, "ADMIN_PASSWORD", hashed):
            assert verify_admin_credentials("admin", "s3cret")
            assert not verify_admin_credentials("admin", "nope")


@pytest.mark.unit
class TestAdminToken:

    def test_valid_token(self):
        token = create_access_token({"is_admin": True})
        payload = verify_admin_token(_request_with_cookie(token))
        assert payload["is_admin"] is True

    def test_missing_cookie(self):
        with pytest.raises(HTTPException) as exc_info:
            verify_admin_token(_request_with_cookie(None))
        assert exc_info.value.status_code == 401

    def test_non_admin_token(self):
        token = create_access_token({"is_admin": False})
        with pytest.raises(HTTPException) as exc_info:
            verify_admin_token(_request_with_cookie(token))
        assert exc_info.value.status_code == 403

    def test_expired_token(self):
        token = create_access_token({"is_admin": True}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(HTTPException) as exc_info:
            verify_admin_token(_request_with_cookie(token))
        assert exc_info.value.detail == "Token expired"

    def test_tampered_token(self):
        token = jwt.encode({"is_admin": True}, "another-key", algorithm="HS256")
        with pytest.raises(HTTPException) as exc_info:
            verify_admin_token(_request_with_cookie(token))
        assert exc_info.value.detail == "Invalid token"
