"""
Notification center.

Holds the notifications dispatched during a session. Expiry is evaluated
lazily when active notifications are listed, so no timers are involved.
"""

from datetime import datetime
import logging
from typing import Optional

from shared.config import get_settings

from .models import Notification, NotificationKind

logger = logging.getLogger(__name__)


class NotificationCenter:
    """In-memory notification sink for a single session."""

    def __init__(self, default_duration_ms: Optional[int] = None):
        if default_duration_ms is None:
            default_duration_ms = get_settings().notification_duration_ms
        self._default_duration_ms = default_duration_ms
        self._notifications: list[Notification] = []

    def notify(
        self,
        kind: NotificationKind,
        title: str,
        message: str,
        duration_ms: Optional[int] = None,
    ) -> Notification:
        """Add a notification and return it."""
        notification = Notification(
            kind=kind,
            title=title,
            message=message,
            duration_ms=self._default_duration_ms if duration_ms is None else duration_ms,
        )
        self._notifications.append(notification)
        logger.debug(f"Notification [{kind.value}] {title}: {message}")
        return notification

    def dismiss(self, notification_id: str) -> bool:
        """Remove a notification. Returns False if it was not present."""
        before = len(self._notifications)
        self._notifications = [n for n in self._notifications if n.id != notification_id]
        return len(self._notifications) != before

    def clear(self) -> None:
        self._notifications = []

    def active(self, now: Optional[datetime] = None) -> list[Notification]:
        """Return notifications that have not expired, dropping the rest."""
        self._notifications = [n for n in self._notifications if not n.is_expired(now)]
        return list(self._notifications)

    @property
    def all(self) -> list[Notification]:
        """Every notification still held, expired or not."""
        return list(self._notifications)
