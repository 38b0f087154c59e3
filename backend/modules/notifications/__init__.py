"""
Notifications module.

In-process notification center used to surface auth warnings and errors.

Public API:
- NotificationCenter: Collects notifications and expires them by duration
- Notification, NotificationKind: Data models
"""

from .models import Notification, NotificationKind
from .center import NotificationCenter

__all__ = [
    "Notification",
    "NotificationKind",
    "NotificationCenter",
]
