"""
Shared fixtures.

Storage tests run against an in-memory SQLite database and a settable
clock, so due status and streaks can be checked at exact moments.
"""

from datetime import datetime, timedelta

import pytest

from homekeep.config import PhotoSettings
from homekeep.models.home import RoomIcon
from homekeep.services.photos import PhotoStorageService
from homekeep.services.storage import SQLiteClient, SQLiteHomeStorage


FIXED_NOW = datetime(2026, 3, 14, 10, 30)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(FIXED_NOW)


@pytest.fixture
def client(clock):
    client = SQLiteClient(path=":memory:", seed_default_rooms=False, clock=clock)
    yield client
    client.close()


@pytest.fixture
def storage(client, clock):
    return SQLiteHomeStorage(client, clock=clock)


@pytest.fixture
def seeded_storage(clock):
    client = SQLiteClient(path=":memory:", seed_default_rooms=True, clock=clock)
    yield SQLiteHomeStorage(client, clock=clock)
    client.close()


@pytest.fixture
def kitchen_id(storage):
    return storage.insert_room("Kitchen", RoomIcon.KITCHEN)


@pytest.fixture
def photo_settings(tmp_path):
    return PhotoSettings(base_dir=str(tmp_path))


@pytest.fixture
def photos(photo_settings):
    return PhotoStorageService(photo_settings)
