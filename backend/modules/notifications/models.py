"""
Notification data models.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional
import uuid

from pydantic import BaseModel, Field


class NotificationKind(str, Enum):
    """Severity of a notification."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Notification(BaseModel):
    """
    A single toast-style notification.

    A duration of 0 makes the notification persistent until dismissed.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    kind: NotificationKind
    title: str
    message: str
    duration_ms: int = Field(default=5000, ge=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}

    @property
    def persistent(self) -> bool:
        return self.duration_ms == 0

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Whether the notification's display duration has elapsed."""
        if self.persistent:
            return False
        now = now or datetime.now(timezone.utc)
        return now >= self.created_at + timedelta(milliseconds=self.duration_ms)
