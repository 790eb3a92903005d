"""Cleaning task state."""

from datetime import datetime
from typing import Callable, Optional

from pydantic import BaseModel

from homekeep.managers.base import BaseManager
from homekeep.models.home import CleaningTask, RoomIcon, TaskDraft, TaskFrequency
from homekeep.services.notifications import NotificationScheduler
from homekeep.services.storage.sqlite import start_of_day


class RoomTaskGroup(BaseModel):
    """Due tasks of one room, for the Clean tab."""
    room_name: str
    room_icon: RoomIcon
    tasks: list[CleaningTask]


class CleaningManager(BaseManager):
    """
    Caches today's due tasks, all active tasks, the tasks of the room
    being viewed and the current streak.

    When a scheduler is attached, reminders are re-planned after every
    reload of the task list.
    """

    def __init__(
        self,
        storage=None,
        scheduler: Optional[NotificationScheduler] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        super().__init__(storage)
        self._scheduler = scheduler
        self._clock = clock
        self.due_tasks: list[CleaningTask] = []
        self.all_tasks: list[CleaningTask] = []
        self.room_tasks: list[CleaningTask] = []
        self.current_streak = 0

    def load_due_tasks(self) -> None:
        self.is_loading = True
        self.due_tasks = self._storage.fetch_due_tasks()
        self.all_tasks = self._storage.fetch_all_active_tasks()
        self.current_streak = self._storage.current_cleaning_streak()
        self.is_loading = False

    def load_tasks(self, room_id: int) -> None:
        self.room_tasks = self._storage.fetch_tasks(room_id)

    def reschedule_reminders(self) -> None:
        if self._scheduler is not None:
            self._scheduler.schedule_upcoming(self.all_tasks)

    def complete_task(self, task_id: int) -> None:
        self._storage.complete_task(task_id)
        self.load_due_tasks()
        self.reschedule_reminders()

    def add_task(
        self,
        room_id: int,
        name: str,
        frequency: TaskFrequency = TaskFrequency.WEEKLY,
    ) -> Optional[int]:
        draft = self._draft(TaskDraft, name=name, frequency=frequency)
        if draft is None:
            return None
        task_id = self._storage.insert_task(room_id, draft.name, draft.frequency)
        self.load_due_tasks()
        self.reschedule_reminders()
        return task_id

    def update_task(
        self,
        task_id: int,
        name: Optional[str] = None,
        frequency: Optional[TaskFrequency] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        if name is not None:
            draft = self._draft(TaskDraft, name=name)
            if draft is None:
                return
            name = draft.name
        self._storage.update_task(task_id, name=name, frequency=frequency, is_active=is_active)
        self.load_due_tasks()
        self.reschedule_reminders()

    def delete_task(self, task_id: int) -> None:
        self._storage.delete_task(task_id)
        self.load_due_tasks()
        self.reschedule_reminders()

    @property
    def tasks_by_room(self) -> list[RoomTaskGroup]:
        """Due tasks grouped by room name, rooms in name order."""
        grouped: dict[str, list[CleaningTask]] = {}
        for task in self.due_tasks:
            grouped.setdefault(task.room_name, []).append(task)
        return [
            RoomTaskGroup(room_name=name, room_icon=tasks[0].room_icon, tasks=tasks)
            for name, tasks in sorted(grouped.items())
        ]

    @property
    def completed_today_count(self) -> int:
        since = start_of_day(self._clock().date())
        return len(self._storage.fetch_all_logs(since))
