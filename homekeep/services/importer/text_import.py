"""
Plain-text Item Import

Reads a UTF-8 text file of item names (one per line, or separated by
commas or semicolons) and hands back the parsed names. Import files can
also be dropped into a watched folder under one of the well-known names
in ``IMPORT_FILE_NAMES``.
"""

from pathlib import Path
from typing import Union

from homekeep.log import get_logger
from homekeep.parsing import parse_item_names


logger = get_logger(__name__)

IMPORT_FILE_NAMES = ("cleanup2_import.txt", "cleanup2_paste_items.txt")

UNREADABLE_MESSAGE = "Could not read file or file is empty."
NO_ITEMS_MESSAGE = "No items found in file."
NO_FILE_MESSAGE = "No import file found."


class ImportFailedError(Exception):
    """Base exception for import errors. The message is user-facing."""
    pass


class UnreadableImportError(ImportFailedError):
    """File is missing, unreadable or not UTF-8."""

    def __init__(self, message: str = UNREADABLE_MESSAGE):
        super().__init__(message)


class EmptyImportError(ImportFailedError):
    def __init__(self, message: str = UNREADABLE_MESSAGE):
        super().__init__(message)


class NoItemsFoundError(ImportFailedError):
    """File had text but no item names survived parsing."""

    def __init__(self, message: str = NO_ITEMS_MESSAGE):
        super().__init__(message)


class NoImportFileError(ImportFailedError):
    def __init__(self, message: str = NO_FILE_MESSAGE):
        super().__init__(message)


def read_import_text(path: Union[str, Path]) -> list[str]:
    """
    Read and parse an import file.

    Args:
        path: File to read

    Returns:
        The parsed item names (never empty)

    Raises:
        UnreadableImportError: If the file can't be read as UTF-8
        EmptyImportError: If the file is empty
        NoItemsFoundError: If parsing yields no names
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("import_read_failed", path=str(path), error=str(e))
        raise UnreadableImportError() from e

    if not text:
        raise EmptyImportError()

    names = parse_item_names(text)
    if not names:
        raise NoItemsFoundError()

    logger.info("import_parsed", path=str(path), count=len(names))
    return names


def find_import_file(directory: Union[str, Path]) -> Path:
    """
    Locate a dropped import file in ``directory``.

    Names in ``IMPORT_FILE_NAMES`` are tried in order.

    Raises:
        NoImportFileError: If none of them exists
    """
    directory = Path(directory).expanduser()
    for name in IMPORT_FILE_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    raise NoImportFileError()
