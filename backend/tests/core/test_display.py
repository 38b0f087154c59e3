"""Tests for core/display.py."""

from rich.console import Console

from core.display import build_state_table, format_status
from modules.auth.models import AuthErrorKind, AuthState, AuthStatus, Identity, Profile


def _render(table) -> str:
    console = Console(width=120, record=True)
    console.print(table)
    return console.export_text()


class TestFormatStatus:
    def test_format_status(self):
        assert format_status(AuthStatus.SIGNED_IN_NO_PROFILE) == "Signed In No Profile"
        assert format_status(AuthStatus.LOADING) == "Loading"


class TestStateTable:
    def test_signed_in_with_profile(self):
        state = AuthState(
            identity=Identity(id="u1", email="alice@example.com"),
            profile=Profile(
                id="u1",
                display_name="Alice",
                timezone="Asia/Taipei",
                preferred_currency="TWD",
            ),
            initialized=True,
            status=AuthStatus.SIGNED_IN_WITH_PROFILE,
        )
        text = _render(build_state_table(state))
        assert "alice@example.com" in text
        assert "Asia/Taipei" in text
        assert "TWD" in text

    def test_new_user(self):
        state = AuthState(
            identity=Identity(id="u1"),
            initialized=True,
            status=AuthStatus.SIGNED_IN_NO_PROFILE,
        )
        assert "new user" in _render(build_state_table(state))

    def test_provider_error(self):
        state = AuthState(
            error=AuthErrorKind.PROVIDER_UNAVAILABLE,
            error_message="down",
            initialized=True,
            status=AuthStatus.ERROR,
        )
        text = _render(build_state_table(state))
        assert "provider_unavailable: down" in text
        assert "False" in text
