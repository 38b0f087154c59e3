from unittest.mock import MagicMock

from modules.auth.interfaces import (
    IAuthService,
    IAuthStateSink,
    IIdentityProvider,
    INotificationSink,
    IProfileStore,
)
from modules.auth.provider import SupabaseIdentityProvider, UnavailableIdentityProvider
from modules.auth.repository import ProfileRepository
from modules.auth.service import AuthService
from modules.auth.store import SessionStore
from modules.notifications.center import NotificationCenter


class TestAuthInterfaces:
    def test_auth_service_has_interface_methods(self):
        """AuthService should have all IAuthService methods."""
        assert hasattr(IAuthService, "validate_token")
        assert callable(getattr(AuthService, "validate_token"))

    def test_identity_providers_implement_interface(self):
        """Both providers satisfy IIdentityProvider."""
        assert isinstance(SupabaseIdentityProvider(MagicMock()), IIdentityProvider)
        assert isinstance(UnavailableIdentityProvider(), IIdentityProvider)

    def test_repository_implements_profile_store(self):
        """ProfileRepository satisfies IProfileStore."""
        assert isinstance(ProfileRepository(MagicMock(), table="profiles"), IProfileStore)

    def test_session_store_implements_sink(self):
        """SessionStore satisfies IAuthStateSink."""
        assert isinstance(SessionStore(), IAuthStateSink)

    def test_notification_center_implements_sink(self):
        """NotificationCenter satisfies INotificationSink."""
        assert isinstance(NotificationCenter(default_duration_ms=1000), INotificationSink)

    def test_fakes_satisfy_interfaces(self, provider, profiles):
        """Test doubles used by the reconciler tests match the protocols."""
        assert isinstance(provider, IIdentityProvider)
        assert isinstance(profiles, IProfileStore)
