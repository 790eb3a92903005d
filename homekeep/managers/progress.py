"""Whole-house progress state."""

from typing import Optional

from homekeep.managers.base import BaseManager
from homekeep.models.home import ItemCategory
from homekeep.models.progress import DailyCompletionCount, DeclutterSummary


class ProgressManager(BaseManager):
    """Loads the summary, category breakdown and recent daily counts."""

    def __init__(self, storage=None, daily_counts_window: int = 30):
        super().__init__(storage)
        self.daily_counts_window = daily_counts_window
        self.summary: Optional[DeclutterSummary] = None
        self.daily_counts: list[DailyCompletionCount] = []
        self.category_breakdown: dict[ItemCategory, int] = {}

    def load_stats(self) -> None:
        self.is_loading = True

        counts = self._storage.count_items_by_category()
        self.category_breakdown = counts

        self.summary = DeclutterSummary(
            total_items=self._storage.total_item_count(),
            keep_count=counts.get(ItemCategory.KEEP, 0),
            donate_count=counts.get(ItemCategory.DONATE, 0),
            trash_count=counts.get(ItemCategory.TRASH, 0),
            sell_count=counts.get(ItemCategory.SELL, 0),
            uncategorized_count=counts.get(ItemCategory.UNCATEGORIZED, 0),
            rooms_decluttered=self._storage.decluttered_room_count(),
            total_rooms=self._storage.total_room_count(),
            current_streak=self._storage.current_cleaning_streak(),
            longest_streak=self._storage.longest_cleaning_streak(),
        )

        self.daily_counts = self._storage.daily_completion_counts(self.daily_counts_window)

        self.is_loading = False
