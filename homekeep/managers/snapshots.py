"""Room snapshot history state."""

from homekeep.managers.base import BaseManager
from homekeep.models.home import DeclutterItem
from homekeep.models.progress import SnapshotDelta, StateSnapshot
from homekeep.snapshots import compute_delta, consecutive_deltas


class SnapshotManager(BaseManager):

    compute_delta = staticmethod(compute_delta)

    def __init__(self, storage=None):
        super().__init__(storage)
        self.snapshots: list[StateSnapshot] = []

    def take_snapshot(self, room_id: int, items: list[DeclutterItem]) -> None:
        self._storage.insert_snapshot(room_id, items)
        self.load_snapshots(room_id)

    def load_snapshots(self, room_id: int) -> None:
        self.is_loading = True
        self.snapshots = self._storage.fetch_snapshots(room_id)
        self.is_loading = False

    def load_all_snapshots(self) -> None:
        self.is_loading = True
        self.snapshots = self._storage.fetch_all_snapshots()
        self.is_loading = False

    def deltas(self, room_id: int) -> list[SnapshotDelta]:
        """Changes between consecutive loaded snapshots of a room, oldest first."""
        return consecutive_deltas(self.snapshots, room_id)
