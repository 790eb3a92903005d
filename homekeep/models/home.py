"""
Core Data Models for homekeep

These models are the display-side view of the rows the storage gateway
reads and writes. All entities are flat records keyed by an
auto-incrementing integer id; derived fields (counts, due status,
streaks) are filled in at read time and never stored.

Enumerated values are stored as their string value. A stored value that
no longer matches an enum member falls back to a default through
``parse()`` instead of failing the read.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ItemCategory(str, Enum):
    """Disposition category of a declutter item."""
    UNCATEGORIZED = "uncategorized"
    KEEP = "keep"
    DONATE = "donate"
    TRASH = "trash"
    SELL = "sell"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ItemCategory":
        try:
            return cls(value)
        except ValueError:
            return cls.UNCATEGORIZED

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def dispositions(cls) -> list["ItemCategory"]:
        """Every category except uncategorized."""
        return [c for c in cls if c is not cls.UNCATEGORIZED]


class TaskFrequency(str, Enum):
    """Recurrence of a cleaning task."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: Optional[str]) -> "TaskFrequency":
        try:
            return cls(value)
        except ValueError:
            return cls.WEEKLY

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def interval_days(self) -> int:
        return _INTERVAL_DAYS[self]


_INTERVAL_DAYS = {
    TaskFrequency.DAILY: 1,
    TaskFrequency.WEEKLY: 7,
    TaskFrequency.MONTHLY: 30,
}


class RoomIcon(str, Enum):
    """Icon tag of a room; also selects its default cleaning tasks."""
    KITCHEN = "kitchen"
    LIVING_ROOM = "livingRoom"
    BEDROOM = "bedroom"
    BATHROOM = "bathroom"
    OFFICE = "office"
    GARAGE = "garage"
    BASEMENT = "basement"
    ATTIC = "attic"
    DINING_ROOM = "diningRoom"
    LAUNDRY = "laundry"
    CLOSET = "closet"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "RoomIcon":
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER

    @property
    def label(self) -> str:
        if self is RoomIcon.LIVING_ROOM:
            return "Living Room"
        if self is RoomIcon.DINING_ROOM:
            return "Dining Room"
        return self.value.capitalize()

    @property
    def default_cleaning_tasks(self) -> list[tuple[str, TaskFrequency]]:
        return list(_DEFAULT_TASKS[self])


_D, _W, _M = TaskFrequency.DAILY, TaskFrequency.WEEKLY, TaskFrequency.MONTHLY

_DEFAULT_TASKS: dict[RoomIcon, tuple[tuple[str, TaskFrequency], ...]] = {
    RoomIcon.KITCHEN: (
        ("Wipe counters", _D),
        ("Do dishes", _D),
        ("Mop floor", _W),
        ("Clean oven", _M),
        ("Clean refrigerator", _M),
    ),
    RoomIcon.LIVING_ROOM: (
        ("Vacuum floor", _W),
        ("Dust surfaces", _W),
        ("Clean windows", _M),
    ),
    RoomIcon.BEDROOM: (
        ("Make bed", _D),
        ("Vacuum floor", _W),
        ("Change sheets", _W),
        ("Dust furniture", _M),
    ),
    RoomIcon.BATHROOM: (
        ("Wipe sink and counter", _D),
        ("Clean toilet", _W),
        ("Scrub shower/tub", _W),
        ("Mop floor", _W),
        ("Deep clean grout", _M),
    ),
    RoomIcon.OFFICE: (
        ("Tidy desk", _D),
        ("Vacuum floor", _W),
        ("Dust electronics", _M),
    ),
    RoomIcon.GARAGE: (
        ("Sweep floor", _W),
        ("Organize tools", _M),
    ),
    RoomIcon.BASEMENT: (
        ("Check for moisture", _W),
        ("Sweep floor", _M),
        ("Organize storage", _M),
    ),
    RoomIcon.ATTIC: (
        ("Check for leaks", _M),
        ("Organize storage", _M),
    ),
    RoomIcon.DINING_ROOM: (
        ("Wipe table", _D),
        ("Vacuum floor", _W),
        ("Polish furniture", _M),
    ),
    RoomIcon.LAUNDRY: (
        ("Wipe machines", _W),
        ("Clean lint trap", _W),
        ("Deep clean washer", _M),
    ),
    RoomIcon.CLOSET: (
        ("Organize clothes", _M),
        ("Vacuum floor", _M),
    ),
    RoomIcon.OTHER: (
        ("General tidy", _W),
        ("Deep clean", _M),
    ),
}

DEFAULT_ROOMS: list[tuple[str, RoomIcon]] = [
    ("Kitchen", RoomIcon.KITCHEN),
    ("Living Room", RoomIcon.LIVING_ROOM),
    ("Master Bedroom", RoomIcon.BEDROOM),
    ("Bathroom", RoomIcon.BATHROOM),
    ("Home Office", RoomIcon.OFFICE),
    ("Garage", RoomIcon.GARAGE),
    ("Dining Room", RoomIcon.DINING_ROOM),
    ("Laundry Room", RoomIcon.LAUNDRY),
]


class SortMode(str, Enum):
    """Client-side ordering of a room's item list."""
    CUSTOM = "custom"
    ALPHABETICAL = "alphabetical"
    RECENT = "recent"

    @property
    def label(self) -> str:
        return {
            SortMode.CUSTOM: "Custom Order",
            SortMode.ALPHABETICAL: "Alphabetical",
            SortMode.RECENT: "Most Recent",
        }[self]


# =============================================================================
# ENTITIES
# =============================================================================

class Room(BaseModel):
    """
    A physical space being decluttered and cleaned.

    The count fields are derived on read by the storage gateway.
    """
    id: int
    name: str
    icon: RoomIcon = RoomIcon.OTHER
    is_decluttered: bool = False
    sort_order: int = 0
    created_at: datetime

    item_count: int = 0
    categorized_count: int = 0
    non_furniture_count: int = 0
    non_furniture_categorized_count: int = 0
    task_count: int = 0
    due_today_count: int = 0
    completed_today_count: int = 0

    @property
    def uncategorized_count(self) -> int:
        return self.item_count - self.categorized_count

    @property
    def declutter_progress(self) -> float:
        """Categorized non-furniture items over all non-furniture items."""
        if self.non_furniture_count <= 0:
            return 1.0 if self.item_count > 0 else 0.0
        return self.non_furniture_categorized_count / self.non_furniture_count

    @property
    def clean_progress(self) -> float:
        """Completions today over tasks due today."""
        if self.due_today_count <= 0:
            return 0.0
        return self.completed_today_count / self.due_today_count

    @property
    def all_items_categorized(self) -> bool:
        return self.item_count > 0 and self.categorized_count == self.item_count

    @property
    def can_mark_decluttered(self) -> bool:
        """Only a room whose every item has a disposition can be closed out."""
        return not self.is_decluttered and self.all_items_categorized


class DeclutterItem(BaseModel):
    """A physical object logged against a room, pending a disposition decision."""
    id: int
    room_id: int
    name: str
    category: ItemCategory = ItemCategory.UNCATEGORIZED
    is_furniture: bool = False
    photo_path: Optional[str] = None
    notes: Optional[str] = None
    sort_order: int = 0
    auto_group: Optional[str] = None
    created_at: datetime

    @property
    def is_categorized(self) -> bool:
        return self.category is not ItemCategory.UNCATEGORIZED


class CleaningTask(BaseModel):
    """
    A recurring chore scoped to a room.

    ``last_completed``, ``is_due_today`` and ``current_streak`` are derived
    from the task's completion logs each time it is fetched.
    """
    id: int
    room_id: int
    name: str
    frequency: TaskFrequency = TaskFrequency.WEEKLY
    is_active: bool = True
    created_at: datetime

    room_name: str = ""
    room_icon: RoomIcon = RoomIcon.OTHER
    last_completed: Optional[datetime] = None
    is_due_today: bool = False
    current_streak: int = 0


class CleaningLog(BaseModel):
    """A single task completion. Append-only."""
    model_config = ConfigDict(frozen=True)

    id: int
    task_id: int
    completed_at: datetime


# =============================================================================
# DRAFTS - user input, validated before it reaches storage
# =============================================================================

class RoomDraft(BaseModel):
    """User input for a new or renamed room."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    icon: RoomIcon = RoomIcon.OTHER


class ItemDraft(BaseModel):
    """User input for a new declutter item."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=200)
    category: ItemCategory = ItemCategory.UNCATEGORIZED
    is_furniture: bool = False
    photo_path: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class TaskDraft(BaseModel):
    """User input for a new cleaning task."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    frequency: TaskFrequency = TaskFrequency.WEEKLY
