"""Rich terminal output for auth session state."""

from rich.console import Console
from rich.table import Table

from modules.auth.models import AuthState, AuthStatus
from modules.notifications.models import Notification, NotificationKind

console = Console()

STATUS_STYLES = {
    AuthStatus.UNINITIALIZED: "dim",
    AuthStatus.LOADING: "yellow",
    AuthStatus.SIGNED_OUT: "blue",
    AuthStatus.SIGNED_IN_NO_PROFILE: "cyan",
    AuthStatus.SIGNED_IN_WITH_PROFILE: "green",
    AuthStatus.ERROR: "red",
}

KIND_STYLES = {
    NotificationKind.SUCCESS: "green",
    NotificationKind.ERROR: "red",
    NotificationKind.WARNING: "yellow",
    NotificationKind.INFO: "blue",
}


def format_status(status: AuthStatus) -> str:
    """Format a status for display.

    Example: AuthStatus.SIGNED_IN_NO_PROFILE -> "Signed In No Profile"
    """
    return status.value.replace("_", " ").title()


def print_transition(state: AuthState) -> None:
    """Print a one-line summary of a state transition."""
    style = STATUS_STYLES.get(state.status, "white")
    who = state.identity.email or state.identity.id if state.identity else "-"
    line = f"[{style}]{format_status(state.status)}[/{style}] [dim]user={who}"
    if state.error:
        line += f" error={state.error.value}"
    console.print(line + "[/dim]")


def build_state_table(state: AuthState) -> Table:
    """Build a two-column table describing the converged state."""
    table = Table(title="Auth state", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Status", format_status(state.status))
    table.add_row("Initialized", str(state.initialized))
    table.add_row("Loading", str(state.loading))
    table.add_row("Identity", state.identity.id if state.identity else "-")
    table.add_row("Email", (state.identity.email or "-") if state.identity else "-")

    profile = state.profile
    if profile is not None:
        table.add_row("Display name", profile.display_name or "-")
        table.add_row("Timezone", profile.timezone or "-")
        table.add_row("Currency", profile.preferred_currency or "-")
        table.add_row("Default market", profile.preferences.default_market.market)
        table.add_row("Profile complete", str(profile.is_complete))
    elif state.is_new_user:
        table.add_row("Profile", "not created yet (new user)")

    if state.error:
        table.add_row("Error", f"{state.error.value}: {state.error_message or ''}")
    table.add_row("Sign-in enabled", str(state.sign_in_enabled))
    return table


def print_notifications(notifications: list[Notification]) -> None:
    """Print notifications, most recent last."""
    for notification in notifications:
        style = KIND_STYLES.get(notification.kind, "white")
        console.print(
            f"[{style}]{notification.title}:[/{style}] {notification.message}"
        )
