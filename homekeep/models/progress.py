"""
Progress Models

Rollups over the declutter and cleaning data: point-in-time room
snapshots, the differences between them, and the whole-house summary.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class StateSnapshot(BaseModel):
    """
    Point-in-time rollup of one room's item counts.

    Snapshots are captured on demand and never modified afterwards.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    room_id: int
    snapshot_date: datetime
    total_items: int = Field(default=0, ge=0)
    categorized_count: int = Field(default=0, ge=0)
    keep_count: int = Field(default=0, ge=0)
    donate_count: int = Field(default=0, ge=0)
    trash_count: int = Field(default=0, ge=0)
    sell_count: int = Field(default=0, ge=0)
    furniture_count: int = Field(default=0, ge=0)
    created_at: datetime


class SnapshotDelta(BaseModel):
    """Field-wise difference between an older and a newer snapshot."""
    model_config = ConfigDict(frozen=True)

    from_snapshot: StateSnapshot
    to_snapshot: StateSnapshot
    items_delta: int
    categorized_delta: int
    keep_delta: int
    donate_delta: int
    trash_delta: int
    sell_delta: int


class DeclutterSummary(BaseModel):
    """Whole-house declutter and cleaning totals for the progress screen."""

    total_items: int = 0
    keep_count: int = 0
    donate_count: int = 0
    trash_count: int = 0
    sell_count: int = 0
    uncategorized_count: int = 0
    rooms_decluttered: int = 0
    total_rooms: int = 0
    current_streak: int = 0
    longest_streak: int = 0

    @property
    def categorized_count(self) -> int:
        return self.keep_count + self.donate_count + self.trash_count + self.sell_count

    @property
    def progress(self) -> float:
        if self.total_items <= 0:
            return 0.0
        return self.categorized_count / self.total_items


class DailyCompletionCount(BaseModel):
    """Number of task completions logged on one calendar day."""
    model_config = ConfigDict(frozen=True)

    day: date
    count: int = Field(ge=0)
