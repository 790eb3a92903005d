"""
Storage Package

Persistence gateway for the home data. Managers depend on
``HomeStorageInterface`` only; ``SQLiteHomeStorage`` is the backend.
"""

from homekeep.services.storage.interface import (
    DatabaseUnavailableError,
    HomeStorageInterface,
    NotFoundError,
    StorageError,
)
from homekeep.services.storage.sqlite import (
    SQLiteClient,
    SQLiteHomeStorage,
    logged_failure,
)

__all__ = [
    # Interface
    "HomeStorageInterface",
    # Implementation
    "SQLiteClient",
    "SQLiteHomeStorage",
    "logged_failure",
    # Exceptions
    "StorageError",
    "NotFoundError",
    "DatabaseUnavailableError",
]
