"""
Importer Package

Plain-text item lists from files.
"""

from homekeep.services.importer.text_import import (
    IMPORT_FILE_NAMES,
    NO_FILE_MESSAGE,
    NO_ITEMS_MESSAGE,
    UNREADABLE_MESSAGE,
    EmptyImportError,
    ImportFailedError,
    NoImportFileError,
    NoItemsFoundError,
    UnreadableImportError,
    find_import_file,
    read_import_text,
)

__all__ = [
    "IMPORT_FILE_NAMES",
    "NO_FILE_MESSAGE",
    "NO_ITEMS_MESSAGE",
    "UNREADABLE_MESSAGE",
    "read_import_text",
    "find_import_file",
    # Exceptions
    "ImportFailedError",
    "UnreadableImportError",
    "EmptyImportError",
    "NoItemsFoundError",
    "NoImportFileError",
]
