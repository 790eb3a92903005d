"""
Notifications Package

Daily cleaning reminders for the coming week.
"""

from homekeep.services.notifications.reminder_service import (
    REMINDER_TITLE,
    InMemoryReminderBackend,
    NotificationScheduler,
    Reminder,
    ReminderBackend,
    ReminderError,
    reminder_body,
)

__all__ = [
    "REMINDER_TITLE",
    "InMemoryReminderBackend",
    "NotificationScheduler",
    "Reminder",
    "ReminderBackend",
    "ReminderError",
    "reminder_body",
]
