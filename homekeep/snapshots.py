"""
Snapshot delta engine

A delta is a plain field-wise difference between two snapshots of the
same room. Elapsed time between the snapshots is not taken into account.
"""

from typing import Iterable

from homekeep.models.home import DeclutterItem, ItemCategory
from homekeep.models.progress import SnapshotDelta, StateSnapshot


def tally_items(items: Iterable[DeclutterItem]) -> dict[str, int]:
    """Snapshot counts for a room's current items."""
    counts = {
        "total_items": 0,
        "categorized_count": 0,
        "keep_count": 0,
        "donate_count": 0,
        "trash_count": 0,
        "sell_count": 0,
        "furniture_count": 0,
    }
    for item in items:
        counts["total_items"] += 1
        if item.is_categorized:
            counts["categorized_count"] += 1
        if item.is_furniture:
            counts["furniture_count"] += 1
        if item.category is ItemCategory.KEEP:
            counts["keep_count"] += 1
        elif item.category is ItemCategory.DONATE:
            counts["donate_count"] += 1
        elif item.category is ItemCategory.TRASH:
            counts["trash_count"] += 1
        elif item.category is ItemCategory.SELL:
            counts["sell_count"] += 1
    return counts


def compute_delta(older: StateSnapshot, newer: StateSnapshot) -> SnapshotDelta:
    return SnapshotDelta(
        from_snapshot=older,
        to_snapshot=newer,
        items_delta=newer.total_items - older.total_items,
        categorized_delta=newer.categorized_count - older.categorized_count,
        keep_delta=newer.keep_count - older.keep_count,
        donate_delta=newer.donate_count - older.donate_count,
        trash_delta=newer.trash_count - older.trash_count,
        sell_delta=newer.sell_count - older.sell_count,
    )


def consecutive_deltas(
    snapshots: Iterable[StateSnapshot],
    room_id: int,
) -> list[SnapshotDelta]:
    """
    Deltas between every consecutive pair of a room's snapshots.

    Snapshots of other rooms are ignored. The result is in chronological
    order and is empty when the room has fewer than two snapshots.
    """
    history = sorted(
        (s for s in snapshots if s.room_id == room_id),
        key=lambda s: (s.snapshot_date, s.id),
    )
    return [
        compute_delta(older, newer)
        for older, newer in zip(history, history[1:])
    ]
