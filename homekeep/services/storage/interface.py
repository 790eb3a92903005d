"""
Abstract Storage Interface

The managers only ever talk to ``HomeStorageInterface``. The SQLite
implementation is the one the app ships with; tests use the same class
over an in-memory database.

Every operation is synchronous and read-after-write: a fetch issued
right after a mutation sees that mutation. Implementations do not raise
on query failure. They log the failure and return an empty result,
``None``, ``0`` or ``False`` instead, so a broken store degrades the UI
rather than crashing it.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Iterable, Optional

from homekeep.models.home import (
    CleaningLog,
    CleaningTask,
    DeclutterItem,
    ItemCategory,
    Room,
    RoomIcon,
    TaskFrequency,
)
from homekeep.models.progress import DailyCompletionCount, StateSnapshot


class HomeStorageInterface(ABC):
    """
    Persistence gateway for rooms, items, tasks, logs and snapshots.

    Mutations return ``True`` (or the new row id) on success and
    ``False`` (or ``None``) when the write failed.
    """

    # -------------------------------------------------------------------------
    # Rooms
    # -------------------------------------------------------------------------

    @abstractmethod
    def fetch_all_rooms(self) -> list[Room]:
        """
        All rooms ordered by sort position, each with its derived counts.

        Returns:
            The rooms, or an empty list if the query failed
        """
        pass

    @abstractmethod
    def fetch_room(self, room_id: int) -> Optional[Room]:
        """A single room with its derived counts, or None."""
        pass

    @abstractmethod
    def insert_room(self, name: str, icon: RoomIcon) -> Optional[int]:
        """
        Create a room after the last existing one.

        Args:
            name: Display name
            icon: Icon tag, which also picks the default cleaning tasks

        Returns:
            The new room id, or None if the insert failed
        """
        pass

    @abstractmethod
    def update_room(
        self,
        room_id: int,
        name: Optional[str] = None,
        icon: Optional[RoomIcon] = None,
        is_decluttered: Optional[bool] = None,
    ) -> bool:
        """Change only the fields that are given."""
        pass

    @abstractmethod
    def delete_room(self, room_id: int) -> bool:
        """
        Delete a room together with its items, tasks, logs and snapshots.
        """
        pass

    @abstractmethod
    def mark_room_decluttered(self, room_id: int) -> bool:
        """
        Flag a room as decluttered.

        The first time a room becomes decluttered its icon's default
        cleaning tasks are created.
        """
        pass

    @abstractmethod
    def reorder_rooms(self, room_ids: list[int]) -> bool:
        """Persist a new room order; position is the index in ``room_ids``."""
        pass

    # -------------------------------------------------------------------------
    # Declutter items
    # -------------------------------------------------------------------------

    @abstractmethod
    def fetch_items(self, room_id: int) -> list[DeclutterItem]:
        """A room's items, newest first."""
        pass

    @abstractmethod
    def insert_item(
        self,
        room_id: int,
        name: str,
        category: ItemCategory = ItemCategory.UNCATEGORIZED,
        is_furniture: bool = False,
        photo_path: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Optional[int]:
        """
        Add one item at the end of the room's custom order.

        Returns:
            The new item id, or None if the insert failed
        """
        pass

    @abstractmethod
    def insert_items(self, room_id: int, names: Iterable[str]) -> int:
        """
        Add uncategorized items in bulk within a single transaction.

        Returns:
            Number of items inserted (0 if the transaction failed)
        """
        pass

    @abstractmethod
    def update_item_category(self, item_id: int, category: ItemCategory) -> bool:
        pass

    @abstractmethod
    def update_item(
        self,
        item_id: int,
        name: Optional[str] = None,
        category: Optional[ItemCategory] = None,
        is_furniture: Optional[bool] = None,
        photo_path: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> bool:
        """Change only the fields that are given."""
        pass

    @abstractmethod
    def update_item_furniture(self, item_id: int, is_furniture: bool) -> bool:
        pass

    @abstractmethod
    def delete_item(self, item_id: int) -> bool:
        pass

    @abstractmethod
    def update_item_sort_orders(self, positions: Iterable[tuple[int, int]]) -> bool:
        """Persist ``(item_id, sort_order)`` pairs in one transaction."""
        pass

    @abstractmethod
    def update_item_groups(self, groups: dict[int, Optional[str]]) -> bool:
        """Persist auto-group labels keyed by item id."""
        pass

    @abstractmethod
    def clear_item_groups(self, room_id: int) -> bool:
        pass

    # -------------------------------------------------------------------------
    # Cleaning tasks
    # -------------------------------------------------------------------------

    @abstractmethod
    def fetch_tasks(self, room_id: int) -> list[CleaningTask]:
        """
        A room's active tasks ordered by name.

        Each task carries its last completion, due-today flag and streak,
        computed at read time.
        """
        pass

    @abstractmethod
    def fetch_all_active_tasks(self) -> list[CleaningTask]:
        """
        Active tasks in decluttered rooms.

        Ordered by room sort position, then task name.
        """
        pass

    @abstractmethod
    def fetch_due_tasks(self) -> list[CleaningTask]:
        """The subset of ``fetch_all_active_tasks`` that is due today."""
        pass

    @abstractmethod
    def insert_task(
        self,
        room_id: int,
        name: str,
        frequency: TaskFrequency,
    ) -> Optional[int]:
        pass

    @abstractmethod
    def update_task(
        self,
        task_id: int,
        name: Optional[str] = None,
        frequency: Optional[TaskFrequency] = None,
        is_active: Optional[bool] = None,
    ) -> bool:
        """Change only the fields that are given."""
        pass

    @abstractmethod
    def delete_task(self, task_id: int) -> bool:
        """Delete a task together with its completion logs."""
        pass

    # -------------------------------------------------------------------------
    # Completion logs
    # -------------------------------------------------------------------------

    @abstractmethod
    def complete_task(self, task_id: int) -> Optional[int]:
        """
        Append a completion log stamped with the current time.

        Returns:
            The new log id, or None if the insert failed
        """
        pass

    @abstractmethod
    def fetch_logs(self, task_id: int, limit: int = 30) -> list[CleaningLog]:
        """A task's most recent completions, newest first."""
        pass

    @abstractmethod
    def fetch_all_logs(self, since: datetime) -> list[CleaningLog]:
        """Every completion at or after ``since``, newest first."""
        pass

    @abstractmethod
    def last_completion(self, task_id: int) -> Optional[datetime]:
        pass

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    @abstractmethod
    def count_items_by_category(self) -> dict[ItemCategory, int]:
        """
        Whole-house item counts per category.

        Every category is present in the result, with 0 where no item
        has it.
        """
        pass

    @abstractmethod
    def total_item_count(self) -> int:
        pass

    @abstractmethod
    def decluttered_room_count(self) -> int:
        pass

    @abstractmethod
    def total_room_count(self) -> int:
        pass

    @abstractmethod
    def completion_count(self, day: date) -> int:
        """Number of completions logged on a calendar day."""
        pass

    @abstractmethod
    def daily_completion_counts(self, days: int = 30) -> list[DailyCompletionCount]:
        """
        Completions per day from ``days`` days ago through today.

        Days with no completions are omitted. Ordered oldest first.
        """
        pass

    # -------------------------------------------------------------------------
    # Streaks
    # -------------------------------------------------------------------------

    @abstractmethod
    def current_cleaning_streak(self) -> int:
        """
        Consecutive days with at least one completion.

        Counting starts today, or yesterday when nothing has been
        completed yet today, so an unfinished day does not break it.
        """
        pass

    @abstractmethod
    def longest_cleaning_streak(self) -> int:
        pass

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    @abstractmethod
    def insert_snapshot(
        self,
        room_id: int,
        items: Iterable[DeclutterItem],
    ) -> Optional[int]:
        """
        Record a snapshot of a room built from its current items.

        Returns:
            The new snapshot id, or None if the insert failed
        """
        pass

    @abstractmethod
    def fetch_snapshots(self, room_id: int) -> list[StateSnapshot]:
        """A room's snapshots, newest first."""
        pass

    @abstractmethod
    def fetch_all_snapshots(self) -> list[StateSnapshot]:
        """Every snapshot, newest first."""
        pass


class StorageError(Exception):
    """Base exception for storage errors."""
    pass


class NotFoundError(StorageError):
    """Raised when a referenced row doesn't exist."""
    pass


class DatabaseUnavailableError(StorageError):
    """Raised when the database could not be opened or set up."""
    pass
