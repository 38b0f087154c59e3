"""
Pytest fixtures for auth module tests.

Provides in-memory collaborators for the reconciler: an identity provider
the test can push events through, and a profile store whose fetches stay
pending until the test resolves them.
"""

import asyncio
from typing import Optional
from unittest.mock import MagicMock

import pytest

from modules.auth.models import Identity, Profile
from modules.auth.store import SessionStore


class FakeIdentityProvider:
    """Identity stream driven by the test."""

    def __init__(self):
        self.on_change = None
        self.on_error = None
        self.subscribe_calls = 0
        self.unsubscribe_calls = 0

    def subscribe(self, on_change, on_error):
        self.subscribe_calls += 1
        self.on_change = on_change
        self.on_error = on_error
        return self._unsubscribe

    def _unsubscribe(self):
        self.unsubscribe_calls += 1

    def emit(self, identity: Optional[Identity]) -> None:
        self.on_change(identity)

    def fail(self, error: Exception) -> None:
        self.on_error(error)


class ControlledProfileStore:
    """Profile store whose fetches resolve only when the test says so."""

    def __init__(self):
        self.calls: list[str] = []
        self.futures: dict[str, list[asyncio.Future]] = {}

    async def fetch_profile(self, identity_id: str) -> Profile:
        self.calls.append(identity_id)
        future = asyncio.get_running_loop().create_future()
        self.futures.setdefault(identity_id, []).append(future)
        return await future

    def resolve(self, identity_id: str, profile: Profile, call: int = -1) -> None:
        self.futures[identity_id][call].set_result(profile)

    def fail(self, identity_id: str, error: Exception, call: int = -1) -> None:
        self.futures[identity_id][call].set_exception(error)

    async def create_profile(self, identity, defaults):
        raise NotImplementedError

    async def update_profile(self, identity_id, update):
        raise NotImplementedError

    async def touch_last_login(self, identity_id):
        return None


async def _settle() -> None:
    """Let scheduled tasks and callbacks run."""
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.fixture
def provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def profiles() -> ControlledProfileStore:
    return ControlledProfileStore()


@pytest.fixture
def sink() -> MagicMock:
    """Store sink that records every write."""
    return MagicMock(spec=SessionStore)


@pytest.fixture
def notifications() -> MagicMock:
    return MagicMock()


@pytest.fixture
def settle():
    return _settle


@pytest.fixture
def identity_a() -> Identity:
    return Identity(
        id="u1",
        email="alice@example.com",
        display_name="Alice",
        email_verified=True,
    )


@pytest.fixture
def identity_b() -> Identity:
    return Identity(id="u2", email="bob@example.com", display_name="Bob")


@pytest.fixture
def make_profile():
    def _make(identity_id: str = "u1", display_name: str = "Alice") -> Profile:
        return Profile(
            id=identity_id,
            email=f"{display_name.lower()}@example.com",
            display_name=display_name,
            timezone="Asia/Taipei",
            preferred_currency="TWD",
        )

    return _make
