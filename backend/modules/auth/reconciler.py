"""
Auth state reconciler.

Merges two asynchronous sources into one consistent AuthState:

- the identity provider's push stream (sign-in, sign-out, token refresh)
- the profile store's pull-based fetch, keyed by identity ID

State machine (per session):

    UNINITIALIZED -> LOADING -> SIGNED_OUT | SIGNED_IN_NO_PROFILE
                                | SIGNED_IN_WITH_PROFILE | ERROR

Every state except UNINITIALIZED is reachable repeatedly as the identity
stream re-emits. Data flows one way: the reconciler owns the state and
pushes it to the store sink, and never reads the sink back.
"""

import asyncio
import logging
import threading
from typing import Any, Callable, Optional

from modules.notifications.models import NotificationKind

from .exceptions import (
    ProfileFetchTransientError,
    ProfileNotFoundError,
    StaleResultError,
)
from .interfaces import (
    IAuthStateSink,
    IIdentityProvider,
    INotificationSink,
    IProfileStore,
    Unsubscribe,
)
from .models import AuthErrorKind, AuthState, AuthStatus, Identity, Profile

logger = logging.getLogger(__name__)

Listener = Callable[[AuthState], None]


class AuthStateReconciler:
    """
    Produces a single, race-free view of the signed-in user and profile.

    Ordering: each identity change bumps a generation counter. A profile
    fetch captures the generation and identity ID when issued and its
    result is applied only if both still match when it resolves.
    """

    def __init__(
        self,
        provider: IIdentityProvider,
        profiles: IProfileStore,
        store: Optional[IAuthStateSink] = None,
        notifications: Optional[INotificationSink] = None,
    ):
        self._provider = provider
        self._profiles = profiles
        self._store = store
        self._notifications = notifications

        self._state = AuthState()
        self._listeners: list[Listener] = []
        self._initialized = asyncio.Event()

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._loop_thread: Optional[int] = None
        self._unsubscribe: Optional[Unsubscribe] = None
        self._stopped = False

        self._generation = 0
        self._tasks: set[asyncio.Task] = set()
        self._pushed: dict[str, Any] = {}

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Subscribe to the identity stream. Must run inside the event loop."""
        if self._unsubscribe is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._loop_thread = threading.get_ident()
        self._stopped = False
        self._unsubscribe = self._provider.subscribe(self._on_identity, self._on_provider_error)

    def stop(self) -> None:
        """
        Unsubscribe, drop any in-flight profile fetches and discard the state.

        A later start() begins a new session from UNINITIALIZED and pushes
        every field to the store again.
        """
        self._stopped = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._generation += 1
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()
        self._listeners.clear()

        self._state = AuthState()
        self._initialized = asyncio.Event()
        self._pushed.clear()

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    def get_auth_state(self) -> AuthState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the new state on every transition.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def wait_until_initialized(self) -> AuthState:
        """Wait for the first terminal state of the session."""
        await self._initialized.wait()
        return self._state

    # -------------------------------------------------------------------------
    # Explicit user actions
    # -------------------------------------------------------------------------

    def retry_profile_fetch(self) -> Optional[asyncio.Task]:
        """
        Retry a failed profile fetch for the current identity.

        Returns None when there is nothing to retry.
        """
        state = self._state
        if state.identity is None or state.error != AuthErrorKind.PROFILE_FETCH_TRANSIENT:
            return None
        self._generation += 1
        self._transition(loading=True, error=None, error_message=None, status=AuthStatus.LOADING)
        return self._schedule_fetch(state.identity.id)

    def refresh_profile(self) -> Optional[asyncio.Task]:
        """
        Re-read the profile after it was created or edited elsewhere.

        The current state stays visible until the result lands.
        """
        state = self._state
        if state.identity is None:
            return None
        if state.loading:
            # A fetch for this identity is already in flight
            return next((t for t in self._tasks if not t.done()), None)
        self._generation += 1
        return self._schedule_fetch(state.identity.id)

    # -------------------------------------------------------------------------
    # Store sync
    # -------------------------------------------------------------------------

    def reconcile(self) -> int:
        """
        Push the converged state to the store sink.

        Only fields that differ from the last pushed values are written, so
        calling this again with unchanged state performs no writes.

        Returns:
            Number of sink writes performed
        """
        if self._store is None or not self._state.initialized:
            return 0

        state = self._state
        desired = (
            ("identity", state.identity, self._store.set_identity),
            ("profile", state.profile, self._store.set_profile),
            ("loading", state.loading, self._store.set_loading),
            ("initialized", state.initialized, self._store.set_initialized),
        )
        writes = 0
        for name, value, setter in desired:
            if name in self._pushed and self._pushed[name] == value:
                continue
            setter(value)
            self._pushed[name] = value
            writes += 1
        return writes

    # -------------------------------------------------------------------------
    # Identity stream callbacks
    # -------------------------------------------------------------------------

    def _on_identity(self, identity: Optional[Identity]) -> None:
        self._dispatch(self._handle_identity, identity)

    def _on_provider_error(self, error: Exception) -> None:
        self._dispatch(self._handle_provider_error, error)

    def _dispatch(self, handler: Callable[[Any], None], arg: Any) -> None:
        # Providers may call back from their own refresh thread
        if self._loop is not None and threading.get_ident() != self._loop_thread:
            self._loop.call_soon_threadsafe(handler, arg)
        else:
            handler(arg)

    def _handle_identity(self, identity: Optional[Identity]) -> None:
        if self._stopped:
            return

        current = self._state.identity

        if identity is None:
            self._generation += 1
            self._transition(
                identity=None,
                profile=None,
                loading=False,
                error=None,
                error_message=None,
                initialized=True,
                status=AuthStatus.SIGNED_OUT,
            )
            return

        if current is not None and current.id == identity.id:
            # Re-emission for the same user: in flight or already resolved
            if identity != current:
                self._transition(identity=identity)
            return

        self._generation += 1
        self._transition(
            identity=identity,
            profile=None,
            loading=True,
            error=None,
            error_message=None,
            status=AuthStatus.LOADING,
        )
        self._schedule_fetch(identity.id)

    def _handle_provider_error(self, error: Exception) -> None:
        if self._stopped:
            return

        logger.warning(f"Identity provider unavailable: {error}")
        already_reported = self._state.error == AuthErrorKind.PROVIDER_UNAVAILABLE
        self._generation += 1
        self._transition(
            identity=None,
            profile=None,
            loading=False,
            error=AuthErrorKind.PROVIDER_UNAVAILABLE,
            error_message=str(error),
            initialized=True,
            status=AuthStatus.ERROR,
        )
        if not already_reported:
            self._notify(
                NotificationKind.WARNING,
                "Authentication unavailable",
                "Sign-in is temporarily disabled. You can keep browsing in read-only mode.",
                duration_ms=0,
            )

    # -------------------------------------------------------------------------
    # Profile fetch
    # -------------------------------------------------------------------------

    def _schedule_fetch(self, identity_id: str) -> asyncio.Task:
        loop = self._loop or asyncio.get_running_loop()
        task = loop.create_task(self._fetch_profile(identity_id, self._generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _fetch_profile(self, identity_id: str, generation: int) -> None:
        logger.debug(f"Fetching profile for {identity_id} (generation {generation})")
        profile: Optional[Profile] = None
        failure: Optional[Exception] = None
        try:
            profile = await self._profiles.fetch_profile(identity_id)
        except ProfileNotFoundError:
            pass
        except ProfileFetchTransientError as e:
            failure = e
        except Exception as e:
            logger.exception(f"Unexpected error fetching profile for {identity_id}")
            failure = ProfileFetchTransientError(identity_id, str(e))

        try:
            self._check_current(identity_id, generation)
        except StaleResultError as e:
            logger.debug(e.message)
            return

        if failure is not None:
            self._apply_fetch_failure(failure)
        elif profile is not None:
            self._transition(
                profile=profile,
                loading=False,
                error=None,
                error_message=None,
                initialized=True,
                status=AuthStatus.SIGNED_IN_WITH_PROFILE,
            )
        else:
            # First sign-in: no profile yet is a valid terminal state
            self._transition(
                profile=None,
                loading=False,
                error=None,
                error_message=None,
                initialized=True,
                status=AuthStatus.SIGNED_IN_NO_PROFILE,
            )

    def _check_current(self, identity_id: str, generation: int) -> None:
        identity = self._state.identity
        if (
            self._stopped
            or generation != self._generation
            or identity is None
            or identity.id != identity_id
        ):
            raise StaleResultError(identity_id, generation, self._generation)

    def _apply_fetch_failure(self, failure: Exception) -> None:
        logger.warning(f"Profile fetch failed: {failure}")
        self._transition(
            loading=False,
            error=AuthErrorKind.PROFILE_FETCH_TRANSIENT,
            error_message=str(failure),
            initialized=True,
            status=AuthStatus.ERROR,
        )
        self._notify(
            NotificationKind.ERROR,
            "Profile unavailable",
            "We couldn't load your profile. Please try again.",
        )

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def _transition(self, **changes: Any) -> None:
        new_state = self._state.model_copy(update=changes)
        if new_state == self._state:
            return

        logger.debug(f"Auth state {self._state.status.value} -> {new_state.status.value}")
        self._state = new_state
        if new_state.initialized:
            self._initialized.set()

        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                logger.exception("Auth state listener failed")

        self.reconcile()

    def _notify(
        self,
        kind: NotificationKind,
        title: str,
        message: str,
        duration_ms: Optional[int] = None,
    ) -> None:
        if self._notifications is not None:
            self._notifications.notify(kind, title, message, duration_ms=duration_ms)
