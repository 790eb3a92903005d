"""
Declutter item state

Holds the items of the room being worked on, the client-side sort mode
and the autogroup flag. Text entry (paste, dictation, import files) goes
through ``parse_item_names`` before anything is written.
"""

from pathlib import Path
from typing import Optional, Union

from homekeep.log import get_logger
from homekeep.managers.base import BaseManager
from homekeep.models.home import (
    DeclutterItem,
    ItemCategory,
    ItemDraft,
    SortMode,
)
from homekeep.parsing import autogroup, parse_item_names
from homekeep.services.importer import (
    ImportFailedError,
    find_import_file,
    read_import_text,
)
from homekeep.services.photos import PhotoStorageService


logger = get_logger(__name__)


def sort_items(items: list[DeclutterItem], mode: SortMode) -> list[DeclutterItem]:
    if mode is SortMode.ALPHABETICAL:
        return sorted(items, key=lambda i: (i.name.casefold(), i.id))
    if mode is SortMode.RECENT:
        return sorted(items, key=lambda i: (i.created_at, i.id), reverse=True)
    return sorted(items, key=lambda i: (i.sort_order, i.id))


class DeclutterManager(BaseManager):
    """
    Items of one room.

    ``items`` is what storage returned (newest first); ``sorted_items``
    is the same list in the current sort mode.
    """

    parse_item_names = staticmethod(parse_item_names)

    def __init__(self, storage=None, photos: Optional[PhotoStorageService] = None):
        super().__init__(storage)
        self._photos = photos
        self.items: list[DeclutterItem] = []
        self.room_id: Optional[int] = None
        self.sort_mode = SortMode.CUSTOM
        self.is_autogrouped = False

    def load_items(self, room_id: int) -> None:
        self.is_loading = True
        if room_id != self.room_id:
            self.is_autogrouped = False
        self.room_id = room_id
        self.items = self._storage.fetch_items(room_id)
        # Stays on after a run that found no shared keywords
        self.is_autogrouped = self.is_autogrouped or any(item.auto_group for item in self.items)
        self.is_loading = False

    @property
    def sorted_items(self) -> list[DeclutterItem]:
        return sort_items(self.items, self.sort_mode)

    @property
    def uncategorized_items(self) -> list[DeclutterItem]:
        return [i for i in self.items if not i.is_categorized]

    @property
    def categorized_items(self) -> list[DeclutterItem]:
        return [i for i in self.items if i.is_categorized]

    def items_for(self, category: ItemCategory) -> list[DeclutterItem]:
        return [i for i in self.items if i.category is category]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_item(
        self,
        room_id: int,
        name: str,
        category: ItemCategory = ItemCategory.UNCATEGORIZED,
        is_furniture: bool = False,
        photo_path: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Optional[int]:
        draft = self._draft(
            ItemDraft,
            name=name,
            category=category,
            is_furniture=is_furniture,
            photo_path=photo_path,
            notes=notes,
        )
        if draft is None:
            return None
        item_id = self._storage.insert_item(
            room_id,
            draft.name,
            category=draft.category,
            is_furniture=draft.is_furniture,
            photo_path=draft.photo_path,
            notes=draft.notes or None,
        )
        self.load_items(room_id)
        return item_id

    def add_items(self, room_id: int, names: list[str]) -> int:
        inserted = self._storage.insert_items(room_id, names)
        self.load_items(room_id)
        return inserted

    def categorize(self, item_id: int, category: ItemCategory, room_id: int) -> None:
        self._storage.update_item_category(item_id, category)
        self.load_items(room_id)

    def update_item(
        self,
        item_id: int,
        room_id: int,
        name: Optional[str] = None,
        category: Optional[ItemCategory] = None,
        photo_path: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> None:
        if name is not None:
            draft = self._draft(ItemDraft, name=name)
            if draft is None:
                return
            name = draft.name
        self._storage.update_item(
            item_id,
            name=name,
            category=category,
            photo_path=photo_path,
            notes=notes,
        )
        self.load_items(room_id)

    def toggle_furniture(self, item_id: int, is_furniture: bool, room_id: int) -> None:
        self._storage.update_item_furniture(item_id, is_furniture)
        self.load_items(room_id)

    def delete_item(self, item_id: int, room_id: int) -> None:
        item = next((i for i in self.items if i.id == item_id), None)
        if self._storage.delete_item(item_id) and item and item.photo_path and self._photos:
            self._photos.delete_photo(item.photo_path)
        self.load_items(room_id)

    def move_item(
        self,
        room_id: int,
        from_index: int,
        to_index: int,
        category: Optional[ItemCategory] = None,
    ) -> None:
        """
        Move an item within the displayed list.

        With ``category`` the indexes refer to that category's section and
        only its items are renumbered, reusing the positions they already
        held. Either way the manager switches to custom order.
        """
        if category is None:
            ordered = self.sorted_items
            slots = list(range(len(ordered)))
        else:
            ordered = sort_items(self.items_for(category), self.sort_mode)
            slots = sorted({item.sort_order for item in ordered})
            if len(slots) != len(ordered):
                slots = list(range(len(ordered)))
        if not 0 <= from_index < len(ordered) or not 0 <= to_index < len(ordered):
            return
        ordered.insert(to_index, ordered.pop(from_index))
        self.sort_mode = SortMode.CUSTOM
        self._storage.update_item_sort_orders(
            (item.id, slot) for slot, item in zip(slots, ordered)
        )
        self.load_items(room_id)

    def autogroup_items(self, room_id: int) -> None:
        groups = autogroup(self._storage.fetch_items(room_id))
        self._storage.update_item_groups(groups)
        logger.info(
            "items_autogrouped",
            room_id=room_id,
            grouped=sum(1 for label in groups.values() if label),
        )
        self.load_items(room_id)
        self.is_autogrouped = True

    def clear_autogroups(self, room_id: int) -> None:
        self._storage.clear_item_groups(room_id)
        self.is_autogrouped = False
        self.load_items(room_id)

    # -------------------------------------------------------------------------
    # Text entry and import
    # -------------------------------------------------------------------------

    def add_items_from_text(self, room_id: int, text: Optional[str]) -> int:
        """Paste or dictation. Empty input is silently ignored."""
        if not text:
            return 0
        names = parse_item_names(text)
        if not names:
            return 0
        return self.add_items(room_id, names)

    def import_from_file(self, room_id: int, path: Union[str, Path]) -> int:
        """
        Add every item named in a text file.

        Returns:
            Number of items added; 0 with ``error_message`` set on failure
        """
        try:
            names = read_import_text(path)
        except ImportFailedError as e:
            self.error_message = str(e)
            return 0
        self.error_message = None
        return self.add_items(room_id, names)

    def import_from_folder(self, room_id: int, directory: Union[str, Path]) -> int:
        """Import the first well-known import file found in ``directory``."""
        try:
            path = find_import_file(directory)
        except ImportFailedError as e:
            self.error_message = str(e)
            return 0
        return self.import_from_file(room_id, path)
