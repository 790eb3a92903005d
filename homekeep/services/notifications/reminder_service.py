"""
Cleaning Reminder Scheduling

Plans one reminder per day for the coming week, on days where at least
one cleaning task will be due. Delivery is delegated to a
``ReminderBackend``; the app ships with an in-memory one, and a platform
notification center can be plugged in behind the same interface.

Rescheduling always starts from a clean slate: every pending reminder
is removed before the new plan is added.
"""

from abc import ABC, abstractmethod
from datetime import datetime, time, timedelta
from typing import Callable, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from homekeep.config import NotificationSettings, get_settings
from homekeep.log import get_logger
from homekeep.models.home import CleaningTask
from homekeep.status import is_due_after_interval


logger = get_logger(__name__)

REMINDER_TITLE = "Cleaning Tasks Due"


class Reminder(BaseModel):
    """A single scheduled local notification."""
    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., description="Stable id, e.g. cleaning-0 for today")
    title: str
    body: str
    fire_at: datetime
    task_count: int = Field(..., ge=1)


class ReminderError(Exception):
    """Raised by a backend that could not accept a reminder."""
    pass


class ReminderBackend(ABC):
    """Where planned reminders are delivered."""

    @abstractmethod
    def remove_all_pending(self) -> None:
        pass

    @abstractmethod
    def add(self, reminder: Reminder) -> None:
        """
        Schedule one reminder.

        Raises:
            ReminderError: If the reminder could not be scheduled
        """
        pass

    @abstractmethod
    def pending(self) -> list[Reminder]:
        pass


class InMemoryReminderBackend(ReminderBackend):
    """Keeps pending reminders in a dict keyed by identifier."""

    def __init__(self):
        self._pending: dict[str, Reminder] = {}

    def remove_all_pending(self) -> None:
        self._pending.clear()

    def add(self, reminder: Reminder) -> None:
        self._pending[reminder.identifier] = reminder

    def pending(self) -> list[Reminder]:
        return sorted(self._pending.values(), key=lambda r: r.fire_at)


def reminder_body(count: int) -> str:
    return f"{count} task{'' if count == 1 else 's'} to complete today"


class NotificationScheduler:
    """
    Plans and schedules cleaning reminders.

    Flow:
    1. Remove every pending reminder
    2. For each day in the horizon (today first), count the tasks that
       will be due on that day
    3. Add a 09:00 reminder for each day with at least one due task,
       up to the configured maximum
    """

    def __init__(
        self,
        backend: Optional[ReminderBackend] = None,
        settings: Optional[NotificationSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._backend = backend or InMemoryReminderBackend()
        self._settings = settings or get_settings().notifications
        self._clock = clock

    @property
    def backend(self) -> ReminderBackend:
        return self._backend

    def plan_reminders(self, tasks: Iterable[CleaningTask]) -> list[Reminder]:
        """Build the reminder plan without touching the backend."""
        tasks = list(tasks)
        now = self._clock()
        reminders: list[Reminder] = []

        for offset in range(self._settings.horizon_days):
            if len(reminders) >= self._settings.max_notifications:
                break

            # Same time of day as now
            target = now + timedelta(days=offset)
            due_count = sum(
                1 for task in tasks
                if is_due_after_interval(task.last_completed, task.frequency, target)
            )
            if due_count == 0:
                continue

            reminders.append(Reminder(
                identifier=f"cleaning-{offset}",
                title=REMINDER_TITLE,
                body=reminder_body(due_count),
                fire_at=datetime.combine(target.date(), time(hour=self._settings.reminder_hour)),
                task_count=due_count,
            ))

        return reminders

    def schedule_upcoming(self, tasks: Iterable[CleaningTask]) -> list[Reminder]:
        """
        Replace all pending reminders with a fresh plan.

        A reminder the backend rejects is logged and skipped.

        Returns:
            The reminders that were scheduled
        """
        self._backend.remove_all_pending()

        scheduled = []
        for reminder in self.plan_reminders(tasks):
            try:
                self._backend.add(reminder)
            except ReminderError as e:
                logger.error(
                    "reminder_schedule_failed",
                    identifier=reminder.identifier,
                    error=str(e),
                )
                continue
            scheduled.append(reminder)

        logger.info("reminders_scheduled", count=len(scheduled))
        return scheduled
