"""
Shared manager plumbing: the storage handle, the loading flag and the
user-facing error message.
"""

from typing import Optional, TypeVar

from pydantic import BaseModel, ValidationError

from homekeep.log import get_logger
from homekeep.services.storage import HomeStorageInterface, SQLiteHomeStorage


logger = get_logger(__name__)

DraftT = TypeVar("DraftT", bound=BaseModel)


def describe_validation_error(error: ValidationError) -> str:
    """First validation problem as a short sentence, e.g. 'Name: ...'."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "input"
    return f"{field.replace('_', ' ').capitalize()}: {first['msg']}"


class BaseManager:
    """
    Base for the per-domain state managers.

    A manager caches what it last loaded in plain attributes and
    reloads after every mutation it performs.
    """

    def __init__(self, storage: Optional[HomeStorageInterface] = None):
        self._storage = storage or SQLiteHomeStorage()
        self.is_loading = False
        self.error_message: Optional[str] = None

    @property
    def storage(self) -> HomeStorageInterface:
        return self._storage

    def clear_error(self) -> None:
        self.error_message = None

    def _draft(self, model: type[DraftT], **fields) -> Optional[DraftT]:
        """Validate user input, recording the problem on failure."""
        try:
            draft = model(**fields)
        except ValidationError as e:
            self.error_message = describe_validation_error(e)
            logger.info("draft_rejected", draft=model.__name__, error=self.error_message)
            return None
        self.error_message = None
        return draft
