"""
Folio - personal investment portfolio tracker.

Terminal client for the auth session: signs in to Supabase, runs the auth
state reconciler and prints every state transition until the session has
converged (and optionally keeps watching for token refreshes or sign-out).
"""

import argparse
import asyncio
import getpass
import logging
import sys
from typing import Optional

from supabase import AuthError, Client

from core.display import build_state_table, console, print_notifications, print_transition
from modules.auth.exceptions import ProfileFetchTransientError
from modules.auth.interfaces import IProfileStore
from modules.auth.models import AuthState
from modules.auth.session import AuthSession, create_auth_session
from shared.database import get_supabase_user_client, is_supabase_configured
from shared.log import configure_logging

logger = logging.getLogger(__name__)


async def wait_for_convergence(session: AuthSession) -> AuthState:
    """Wait until the session is initialized and no fetch is in flight."""
    converged = asyncio.Event()

    def on_change(state: AuthState) -> None:
        if state.converged:
            converged.set()

    unsubscribe = session.reconciler.subscribe(on_change)
    try:
        if not session.state.converged:
            await converged.wait()
    finally:
        unsubscribe()
    return session.state


async def record_sign_in(profiles: IProfileStore, identity_id: str) -> None:
    """Stamp the profile's last login. A failure does not block the session."""
    try:
        await profiles.touch_last_login(identity_id)
    except ProfileFetchTransientError as e:
        logger.warning(f"Could not record sign-in: {e.message}")


async def run_session(
    client: Client,
    watch_seconds: float,
    signed_in_id: Optional[str] = None,
) -> AuthState:
    """Run an auth session on a signed-in client.

    Args:
        client: Supabase client (already signed in, or not)
        watch_seconds: How long to keep printing transitions after convergence
        signed_in_id: Identity that just signed in, whose last login is recorded

    Returns:
        The last state observed before the session was closed
    """
    session = create_auth_session(client)
    session.reconciler.subscribe(print_transition)

    if signed_in_id is not None:
        await record_sign_in(session.profiles, signed_in_id)

    async with session:
        state = await wait_for_convergence(session)
        if watch_seconds > 0:
            console.print(f"[dim]Watching for {watch_seconds:g}s...[/dim]")
            await asyncio.sleep(watch_seconds)
            state = session.state

        console.print()
        console.print(build_state_table(state))
        print_notifications(session.notifications.active())

    return state


def main(email: str, password: str, watch_seconds: float) -> int:
    """Main entry point.

    Returns:
        Process exit code
    """
    if not is_supabase_configured():
        console.print(
            "[red]Error:[/red] Supabase is not configured. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY."
        )
        return 1

    client = get_supabase_user_client()
    try:
        response = client.auth.sign_in_with_password({"email": email, "password": password})
    except AuthError as e:
        console.print(f"[red]Sign-in failed:[/red] {e.message}")
        return 1

    signed_in_id = str(response.user.id) if response.user else None
    state = asyncio.run(run_session(client, watch_seconds, signed_in_id))
    return 0 if state.error is None else 2


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Sign in and show the reconciled auth session state"
    )
    parser.add_argument("--email", "-e", required=True, help="Account email")
    parser.add_argument(
        "--password", "-p",
        help="Account password (prompted for when omitted)",
    )
    parser.add_argument(
        "--watch", "-w",
        type=float,
        default=0,
        help="Seconds to keep watching auth events after convergence",
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    args = parser.parse_args()

    configure_logging(args.log_level)
    password = args.password or getpass.getpass("Password: ")
    sys.exit(main(args.email, password, args.watch))
