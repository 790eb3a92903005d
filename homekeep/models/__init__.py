"""
Data Models Package

Pydantic models for rooms, declutter items, cleaning tasks and the
progress rollups built from them.
"""

from homekeep.models.home import (
    DEFAULT_ROOMS,
    CleaningLog,
    CleaningTask,
    DeclutterItem,
    ItemCategory,
    ItemDraft,
    Room,
    RoomDraft,
    RoomIcon,
    SortMode,
    TaskDraft,
    TaskFrequency,
)
from homekeep.models.progress import (
    DailyCompletionCount,
    DeclutterSummary,
    SnapshotDelta,
    StateSnapshot,
)

__all__ = [
    # Home models
    "DEFAULT_ROOMS",
    "CleaningLog",
    "CleaningTask",
    "DeclutterItem",
    "ItemCategory",
    "ItemDraft",
    "Room",
    "RoomDraft",
    "RoomIcon",
    "SortMode",
    "TaskDraft",
    "TaskFrequency",
    # Progress models
    "DailyCompletionCount",
    "DeclutterSummary",
    "SnapshotDelta",
    "StateSnapshot",
]
