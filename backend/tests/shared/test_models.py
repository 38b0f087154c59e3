"""
Tests for shared models.
"""

import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from shared.models import AuthenticatedUser


class TestAuthenticatedUser:
    def test_minimal_identity(self):
        """A Supabase subject and email are enough; everything else defaults."""
        user = AuthenticatedUser(id="8d6f1c2e-0000-4000-8000-000000000001", email="alice@example.com")

        assert user.email_verified is False
        assert user.role == "user"
        assert user.created_at is None
        assert user.last_sign_in is None

    def test_sign_in_time_from_issued_at(self):
        """The issued-at claim converts to an aware last_sign_in."""
        issued = datetime.fromtimestamp(1_767_225_600, tz=timezone.utc)
        user = AuthenticatedUser(
            id="u1",
            email="alice@example.com",
            email_verified=True,
            last_sign_in=issued,
            role="service_role",
        )

        assert user.last_sign_in.tzinfo is not None
        assert user.last_sign_in.year == 2026
        assert user.role == "service_role"

    def test_rejects_malformed_email(self):
        with pytest.raises(ValidationError):
            AuthenticatedUser(id="u1", email="alice-at-example")

    def test_frozen(self):
        """A validated user cannot be altered by a route handler."""
        user = AuthenticatedUser(id="u1", email="alice@example.com")
        with pytest.raises(ValidationError):
            user.role = "admin"

    def test_ignores_unmapped_jwt_claims(self):
        """Supabase claims we don't model (aud, app_metadata, ...) are dropped."""
        claims = {
            "id": "u1",
            "email": "alice@example.com",
            "aud": "authenticated",
            "app_metadata": {"provider": "email"},
            "session_id": "s1",
        }
        user = AuthenticatedUser(**claims)

        assert not hasattr(user, "aud")
        assert set(user.model_dump()) == {
            "id", "email", "email_verified", "created_at", "last_sign_in", "role",
        }
