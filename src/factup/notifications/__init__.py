"""Daily fact reminders."""

from .planner import (
    SAMPLE_FACTS,
    NotificationSettings,
    PlannedNotification,
    confirmation_message,
    format_hour,
    plan_notifications,
)

__all__ = [
    "SAMPLE_FACTS",
    "NotificationSettings",
    "PlannedNotification",
    "confirmation_message",
    "format_hour",
    "plan_notifications",
]
