"""Room list state."""

from typing import Optional

from homekeep.managers.base import BaseManager
from homekeep.models.home import Room, RoomDraft, RoomIcon


UNFINISHED_ROOM_MESSAGE = "Categorize every item before marking the room decluttered."


class RoomManager(BaseManager):
    """Caches all rooms in sort order."""

    def __init__(self, storage=None):
        super().__init__(storage)
        self.rooms: list[Room] = []

    def load_rooms(self) -> None:
        self.is_loading = True
        self.rooms = self._storage.fetch_all_rooms()
        self.is_loading = False

    def add_room(self, name: str, icon: RoomIcon = RoomIcon.OTHER) -> Optional[int]:
        draft = self._draft(RoomDraft, name=name, icon=icon)
        if draft is None:
            return None
        room_id = self._storage.insert_room(draft.name, draft.icon)
        self.load_rooms()
        return room_id

    def update_room(
        self,
        room_id: int,
        name: Optional[str] = None,
        icon: Optional[RoomIcon] = None,
    ) -> None:
        if name is not None:
            draft = self._draft(RoomDraft, name=name)
            if draft is None:
                return
            name = draft.name
        self._storage.update_room(room_id, name=name, icon=icon)
        self.load_rooms()

    def delete_room(self, room_id: int) -> None:
        self._storage.delete_room(room_id)
        self.load_rooms()

    def mark_decluttered(self, room_id: int) -> bool:
        """
        Close out a room and seed its cleaning tasks.

        Refused, with ``error_message`` set, until the room has items and
        all of them are categorized.
        """
        room = self._storage.fetch_room(room_id)
        if room is None or not room.all_items_categorized:
            self.error_message = UNFINISHED_ROOM_MESSAGE
            return False
        self.error_message = None
        self._storage.mark_room_decluttered(room_id)
        self.load_rooms()
        return True

    def move_room(self, from_index: int, to_index: int) -> None:
        """Move a room within the list and persist the new order."""
        order = [room.id for room in self.rooms]
        if not 0 <= from_index < len(order) or not 0 <= to_index < len(order):
            return
        order.insert(to_index, order.pop(from_index))
        self._storage.reorder_rooms(order)
        self.load_rooms()

    def room(self, room_id: int) -> Optional[Room]:
        return next((r for r in self.rooms if r.id == room_id), None)

    @property
    def decluttered_rooms(self) -> list[Room]:
        return [r for r in self.rooms if r.is_decluttered]

    @property
    def undecluttered_rooms(self) -> list[Room]:
        return [r for r in self.rooms if not r.is_decluttered]
