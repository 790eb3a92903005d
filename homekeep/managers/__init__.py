"""
Managers Package

One state manager per domain. Each caches what it last loaded and
reloads after every mutation it performs.
"""

from homekeep.managers.base import BaseManager, describe_validation_error
from homekeep.managers.cleaning import CleaningManager, RoomTaskGroup
from homekeep.managers.declutter import DeclutterManager, sort_items
from homekeep.managers.progress import ProgressManager
from homekeep.managers.rooms import RoomManager
from homekeep.managers.snapshots import SnapshotManager

__all__ = [
    "BaseManager",
    "describe_validation_error",
    "CleaningManager",
    "RoomTaskGroup",
    "DeclutterManager",
    "sort_items",
    "ProgressManager",
    "RoomManager",
    "SnapshotManager",
]
