"""
Tests for the SQLite storage gateway

Covers CRUD, cascades, derived counts, due status, streaks, snapshots,
column migrations and the log-and-degrade failure policy.
"""

import sqlite3
from datetime import date, datetime, timedelta

import pytest
from structlog.testing import capture_logs

from homekeep.models.home import ItemCategory, RoomIcon, TaskFrequency
from homekeep.services.storage import (
    DatabaseUnavailableError,
    SQLiteClient,
    SQLiteHomeStorage,
)


def table_count(client, table):
    return client.connect().execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


class TestSeedingAndSchema:
    """Tests for database setup."""

    def test_default_rooms_seeded_in_order(self, seeded_storage):
        rooms = seeded_storage.fetch_all_rooms()
        assert [r.name for r in rooms] == [
            "Kitchen", "Living Room", "Master Bedroom", "Bathroom",
            "Home Office", "Garage", "Dining Room", "Laundry Room",
        ]
        assert [r.sort_order for r in rooms] == list(range(8))
        assert rooms[1].icon is RoomIcon.LIVING_ROOM
        assert not any(r.is_decluttered for r in rooms)

    def test_seeding_happens_once(self, tmp_path, clock):
        path = str(tmp_path / "home.sqlite")
        first = SQLiteClient(path=path, seed_default_rooms=True, clock=clock)
        first.connect()
        first.close()

        second = SQLiteClient(path=path, seed_default_rooms=True, clock=clock)
        assert SQLiteHomeStorage(second).total_room_count() == 8
        second.close()

    def test_missing_columns_are_added(self, tmp_path, clock):
        path = tmp_path / "old.sqlite"
        conn = sqlite3.connect(path)
        conn.executescript(
            """
            CREATE TABLE rooms (
                id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL,
                icon TEXT NOT NULL, is_decluttered INTEGER NOT NULL DEFAULT 0,
                sort_order INTEGER NOT NULL DEFAULT 0, created_at TEXT NOT NULL
            );
            CREATE TABLE declutter_items (
                id INTEGER PRIMARY KEY AUTOINCREMENT, room_id INTEGER NOT NULL,
                name TEXT NOT NULL, category TEXT NOT NULL DEFAULT 'uncategorized',
                photo_path TEXT, notes TEXT, created_at TEXT NOT NULL
            );
            INSERT INTO rooms (name, icon, created_at) VALUES ('Den', 'other', '2025-01-01 09:00:00');
            INSERT INTO declutter_items (room_id, name, created_at) VALUES (1, 'Lamp', '2025-01-01 09:00:00');
            """
        )
        conn.commit()
        conn.close()

        client = SQLiteClient(path=str(path), seed_default_rooms=True, clock=clock)
        storage = SQLiteHomeStorage(client)
        items = storage.fetch_items(1)
        assert len(items) == 1
        assert items[0].is_furniture is False
        assert items[0].auto_group is None
        assert storage.total_room_count() == 1
        client.close()


class TestRooms:
    """Tests for room CRUD."""

    def test_insert_room_goes_last(self, seeded_storage):
        room_id = seeded_storage.insert_room("Attic", RoomIcon.ATTIC)
        room = seeded_storage.fetch_room(room_id)
        assert room.sort_order == 8
        assert seeded_storage.fetch_all_rooms()[-1].id == room_id

    def test_first_room_in_empty_database(self, storage):
        room_id = storage.insert_room("Den", RoomIcon.OTHER)
        assert storage.fetch_room(room_id).sort_order == 1

    def test_fetch_missing_room(self, storage):
        assert storage.fetch_room(999) is None

    def test_update_room_changes_only_given_fields(self, storage, kitchen_id):
        assert storage.update_room(kitchen_id, name="Galley")
        room = storage.fetch_room(kitchen_id)
        assert room.name == "Galley"
        assert room.icon is RoomIcon.KITCHEN

    def test_update_missing_room_fails(self, storage):
        assert storage.update_room(999, name="Nope") is False

    def test_reorder_rooms(self, storage):
        a = storage.insert_room("A", RoomIcon.OTHER)
        b = storage.insert_room("B", RoomIcon.OTHER)
        c = storage.insert_room("C", RoomIcon.OTHER)
        assert storage.reorder_rooms([c, a, b])
        assert [r.id for r in storage.fetch_all_rooms()] == [c, a, b]

    def test_mark_decluttered_seeds_default_tasks(self, storage, kitchen_id):
        assert storage.mark_room_decluttered(kitchen_id)
        assert storage.fetch_room(kitchen_id).is_decluttered
        names = [t.name for t in storage.fetch_tasks(kitchen_id)]
        assert names == [
            "Clean oven", "Clean refrigerator", "Do dishes", "Mop floor", "Wipe counters",
        ]

    def test_mark_decluttered_twice_does_not_duplicate_tasks(self, storage, kitchen_id):
        storage.mark_room_decluttered(kitchen_id)
        storage.mark_room_decluttered(kitchen_id)
        assert len(storage.fetch_tasks(kitchen_id)) == 5

    def test_mark_missing_room_decluttered(self, storage):
        assert storage.mark_room_decluttered(999) is False

    def test_delete_room_cascades(self, storage, client, kitchen_id):
        storage.insert_item(kitchen_id, "Mug")
        storage.mark_room_decluttered(kitchen_id)
        task_id = storage.fetch_tasks(kitchen_id)[0].id
        storage.complete_task(task_id)
        storage.insert_snapshot(kitchen_id, storage.fetch_items(kitchen_id))

        assert storage.delete_room(kitchen_id)

        assert storage.fetch_room(kitchen_id) is None
        for table in ("declutter_items", "cleaning_tasks", "cleaning_logs", "state_snapshots"):
            assert table_count(client, table) == 0

    def test_delete_room_keeps_other_rooms_data(self, storage, client, kitchen_id):
        other = storage.insert_room("Garage", RoomIcon.GARAGE)
        storage.insert_item(other, "Rake")
        storage.delete_room(kitchen_id)
        assert table_count(client, "declutter_items") == 1


class TestRoomCounts:
    """Tests for counts derived on read."""

    def test_item_counts(self, storage, kitchen_id):
        storage.insert_item(kitchen_id, "Plate", category=ItemCategory.KEEP)
        storage.insert_item(kitchen_id, "Chair", is_furniture=True)
        storage.insert_item(kitchen_id, "Cup")
        storage.insert_item(kitchen_id, "Sofa", category=ItemCategory.DONATE, is_furniture=True)

        room = storage.fetch_room(kitchen_id)
        assert room.item_count == 4
        assert room.categorized_count == 2
        assert room.non_furniture_count == 2
        assert room.non_furniture_categorized_count == 1
        assert room.declutter_progress == 0.5

    def test_task_counts(self, storage, kitchen_id):
        storage.mark_room_decluttered(kitchen_id)
        room = storage.fetch_room(kitchen_id)
        assert room.task_count == 5
        assert room.due_today_count == 5
        assert room.completed_today_count == 0

        storage.complete_task(storage.fetch_tasks(kitchen_id)[0].id)
        room = storage.fetch_room(kitchen_id)
        assert room.due_today_count == 4
        assert room.completed_today_count == 1
        assert room.clean_progress == 0.25

    def test_completions_before_today_not_counted(self, storage, kitchen_id, clock):
        task_id = storage.insert_task(kitchen_id, "Sweep", TaskFrequency.DAILY)
        storage.complete_task(task_id)
        clock.advance(days=1)
        assert storage.fetch_room(kitchen_id).completed_today_count == 0

    def test_inactive_tasks_not_counted(self, storage, kitchen_id):
        task_id = storage.insert_task(kitchen_id, "Sweep", TaskFrequency.DAILY)
        storage.update_task(task_id, is_active=False)
        assert storage.fetch_room(kitchen_id).task_count == 0

    def test_unknown_category_counts_as_uncategorized(self, storage, client, kitchen_id):
        item_id = storage.insert_item(kitchen_id, "Vase", category=ItemCategory.KEEP)
        with client.connect() as conn:
            conn.execute("UPDATE declutter_items SET category = 'gift' WHERE id = ?", (item_id,))

        assert storage.fetch_items(kitchen_id)[0].category is ItemCategory.UNCATEGORIZED
        assert storage.fetch_room(kitchen_id).categorized_count == 0
        counts = storage.count_items_by_category()
        assert counts[ItemCategory.UNCATEGORIZED] == 1
        assert counts[ItemCategory.KEEP] == 0


class TestItems:
    """Tests for declutter item CRUD."""

    def test_fetch_items_newest_first(self, storage, kitchen_id, clock):
        storage.insert_item(kitchen_id, "Old")
        clock.advance(minutes=5)
        storage.insert_item(kitchen_id, "New")
        assert [i.name for i in storage.fetch_items(kitchen_id)] == ["New", "Old"]

    def test_insert_item_sort_order_increments(self, storage, kitchen_id):
        first = storage.insert_item(kitchen_id, "A")
        second = storage.insert_item(kitchen_id, "B")
        orders = {i.id: i.sort_order for i in storage.fetch_items(kitchen_id)}
        assert orders[second] == orders[first] + 1

    def test_insert_items_bulk(self, storage, kitchen_id):
        assert storage.insert_items(kitchen_id, ["Pot", "  ", "Pan", "Lid"]) == 3
        items = storage.fetch_items(kitchen_id)
        assert sorted(i.name for i in items) == ["Lid", "Pan", "Pot"]
        assert all(i.category is ItemCategory.UNCATEGORIZED for i in items)
        assert sorted(i.sort_order for i in items) == [1, 2, 3]

    def test_insert_items_nothing_to_insert(self, storage, kitchen_id):
        assert storage.insert_items(kitchen_id, []) == 0

    def test_insert_item_for_missing_room_fails(self, storage):
        assert storage.insert_item(999, "Ghost") is None

    def test_update_item_category(self, storage, kitchen_id):
        item_id = storage.insert_item(kitchen_id, "Mug")
        assert storage.update_item_category(item_id, ItemCategory.TRASH)
        assert storage.fetch_items(kitchen_id)[0].category is ItemCategory.TRASH

    def test_update_item_partial(self, storage, kitchen_id):
        item_id = storage.insert_item(kitchen_id, "Mug", notes="chipped", photo_path="Photos/a.jpg")
        storage.update_item(item_id, name="Big mug")
        item = storage.fetch_items(kitchen_id)[0]
        assert item.name == "Big mug"
        assert item.notes == "chipped"
        assert item.photo_path == "Photos/a.jpg"

    def test_update_item_furniture(self, storage, kitchen_id):
        item_id = storage.insert_item(kitchen_id, "Table")
        storage.update_item_furniture(item_id, True)
        assert storage.fetch_items(kitchen_id)[0].is_furniture

    def test_delete_item(self, storage, kitchen_id):
        item_id = storage.insert_item(kitchen_id, "Mug")
        assert storage.delete_item(item_id)
        assert storage.fetch_items(kitchen_id) == []
        assert storage.delete_item(item_id) is False

    def test_sort_orders_and_groups(self, storage, kitchen_id):
        a = storage.insert_item(kitchen_id, "A")
        b = storage.insert_item(kitchen_id, "B")
        storage.update_item_sort_orders([(a, 5), (b, 0)])
        storage.update_item_groups({a: "Mugs", b: None})
        items = {i.id: i for i in storage.fetch_items(kitchen_id)}
        assert items[a].sort_order == 5
        assert items[b].sort_order == 0
        assert items[a].auto_group == "Mugs"

        storage.clear_item_groups(kitchen_id)
        assert all(i.auto_group is None for i in storage.fetch_items(kitchen_id))


class TestTasks:
    """Tests for cleaning tasks and their derived status."""

    def test_new_task_is_due(self, storage, kitchen_id):
        task_id = storage.insert_task(kitchen_id, "Sweep", TaskFrequency.WEEKLY)
        task = storage.fetch_tasks(kitchen_id)[0]
        assert task.id == task_id
        assert task.is_due_today
        assert task.last_completed is None
        assert task.room_name == "Kitchen"
        assert task.room_icon is RoomIcon.KITCHEN

    def test_daily_task_due_again_tomorrow(self, storage, kitchen_id, clock):
        storage.insert_task(kitchen_id, "Dishes", TaskFrequency.DAILY)
        task_id = storage.fetch_tasks(kitchen_id)[0].id
        storage.complete_task(task_id)

        clock.now = clock.now.replace(hour=23, minute=59)
        assert not storage.fetch_tasks(kitchen_id)[0].is_due_today

        clock.advance(minutes=2)
        assert storage.fetch_tasks(kitchen_id)[0].is_due_today

    def test_weekly_task_due_after_seven_days(self, storage, kitchen_id, clock):
        task_id = storage.insert_task(kitchen_id, "Mop", TaskFrequency.WEEKLY)
        storage.complete_task(task_id)

        clock.advance(days=6)
        assert not storage.fetch_tasks(kitchen_id)[0].is_due_today
        clock.advance(days=1)
        assert storage.fetch_tasks(kitchen_id)[0].is_due_today

    def test_monthly_task_due_after_thirty_days(self, storage, kitchen_id, clock):
        task_id = storage.insert_task(kitchen_id, "Oven", TaskFrequency.MONTHLY)
        storage.complete_task(task_id)
        clock.advance(days=29)
        assert not storage.fetch_tasks(kitchen_id)[0].is_due_today
        clock.advance(days=1)
        assert storage.fetch_tasks(kitchen_id)[0].is_due_today

    def test_task_streak(self, storage, kitchen_id, clock):
        task_id = storage.insert_task(kitchen_id, "Dishes", TaskFrequency.DAILY)
        for _ in range(3):
            storage.complete_task(task_id)
            clock.advance(days=1)
        # Nothing yet on the fourth day; streak still counts from yesterday
        assert storage.fetch_tasks(kitchen_id)[0].current_streak == 3

    def test_fetch_all_active_tasks(self, storage):
        bath = storage.insert_room("Bathroom", RoomIcon.BATHROOM)
        den = storage.insert_room("Den", RoomIcon.OTHER)
        kitchen = storage.insert_room("Kitchen", RoomIcon.KITCHEN)
        storage.reorder_rooms([kitchen, bath, den])

        storage.update_room(bath, is_decluttered=True)
        storage.update_room(kitchen, is_decluttered=True)
        storage.insert_task(bath, "Scrub", TaskFrequency.WEEKLY)
        storage.insert_task(kitchen, "Wipe", TaskFrequency.DAILY)
        storage.insert_task(kitchen, "Dishes", TaskFrequency.DAILY)
        storage.insert_task(den, "Dust", TaskFrequency.WEEKLY)
        hidden = storage.insert_task(kitchen, "Archive", TaskFrequency.WEEKLY)
        storage.update_task(hidden, is_active=False)

        tasks = storage.fetch_all_active_tasks()
        assert [(t.room_name, t.name) for t in tasks] == [
            ("Kitchen", "Dishes"), ("Kitchen", "Wipe"), ("Bathroom", "Scrub"),
        ]

    def test_fetch_due_tasks(self, storage, kitchen_id):
        storage.update_room(kitchen_id, is_decluttered=True)
        done = storage.insert_task(kitchen_id, "Dishes", TaskFrequency.DAILY)
        storage.insert_task(kitchen_id, "Mop", TaskFrequency.WEEKLY)
        storage.complete_task(done)
        assert [t.name for t in storage.fetch_due_tasks()] == ["Mop"]

    def test_update_task(self, storage, kitchen_id):
        task_id = storage.insert_task(kitchen_id, "Mop", TaskFrequency.WEEKLY)
        storage.update_task(task_id, frequency=TaskFrequency.DAILY)
        task = storage.fetch_tasks(kitchen_id)[0]
        assert task.frequency is TaskFrequency.DAILY
        assert task.name == "Mop"

    def test_delete_task_removes_logs(self, storage, client, kitchen_id):
        task_id = storage.insert_task(kitchen_id, "Mop", TaskFrequency.WEEKLY)
        storage.complete_task(task_id)
        assert storage.delete_task(task_id)
        assert table_count(client, "cleaning_logs") == 0


class TestLogs:
    """Tests for completion logs."""

    def test_complete_missing_task_fails(self, storage):
        assert storage.complete_task(999) is None

    def test_fetch_logs_newest_first_with_limit(self, storage, kitchen_id, clock):
        task_id = storage.insert_task(kitchen_id, "Dishes", TaskFrequency.DAILY)
        for _ in range(4):
            storage.complete_task(task_id)
            clock.advance(hours=1)
        logs = storage.fetch_logs(task_id, limit=3)
        assert len(logs) == 3
        assert logs[0].completed_at > logs[1].completed_at > logs[2].completed_at

    def test_fetch_all_logs_since(self, storage, kitchen_id, clock):
        task_id = storage.insert_task(kitchen_id, "Dishes", TaskFrequency.DAILY)
        storage.complete_task(task_id)
        clock.advance(days=2)
        storage.complete_task(task_id)
        assert len(storage.fetch_all_logs(clock.now - timedelta(days=1))) == 1

    def test_last_completion(self, storage, kitchen_id, clock):
        task_id = storage.insert_task(kitchen_id, "Dishes", TaskFrequency.DAILY)
        assert storage.last_completion(task_id) is None
        storage.complete_task(task_id)
        assert storage.last_completion(task_id) == clock.now


class TestAggregates:
    """Tests for whole-house counts."""

    def test_counts(self, storage, kitchen_id):
        garage = storage.insert_room("Garage", RoomIcon.GARAGE)
        storage.insert_item(kitchen_id, "Mug", category=ItemCategory.KEEP)
        storage.insert_item(kitchen_id, "Bowl", category=ItemCategory.KEEP)
        storage.insert_item(garage, "Rake", category=ItemCategory.SELL)
        storage.insert_item(garage, "Box")
        storage.update_room(garage, is_decluttered=True)

        counts = storage.count_items_by_category()
        assert counts[ItemCategory.KEEP] == 2
        assert counts[ItemCategory.SELL] == 1
        assert counts[ItemCategory.UNCATEGORIZED] == 1
        assert counts[ItemCategory.DONATE] == 0
        assert storage.total_item_count() == 4
        assert storage.total_room_count() == 2
        assert storage.decluttered_room_count() == 1

    def test_completion_count_per_day(self, storage, kitchen_id, clock):
        task_id = storage.insert_task(kitchen_id, "Dishes", TaskFrequency.DAILY)
        storage.complete_task(task_id)
        storage.complete_task(task_id)
        clock.advance(days=1)
        storage.complete_task(task_id)

        assert storage.completion_count(date(2026, 3, 14)) == 2
        assert storage.completion_count(date(2026, 3, 15)) == 1
        assert storage.completion_count(date(2026, 3, 16)) == 0

    def test_daily_completion_counts_window(self, storage, kitchen_id, clock):
        task_id = storage.insert_task(kitchen_id, "Dishes", TaskFrequency.DAILY)
        start = clock.now
        clock.now = start - timedelta(days=40)
        storage.complete_task(task_id)
        clock.now = start - timedelta(days=3)
        storage.complete_task(task_id)
        storage.complete_task(task_id)
        clock.now = start
        storage.complete_task(task_id)

        counts = storage.daily_completion_counts(30)
        assert [(c.day, c.count) for c in counts] == [
            (date(2026, 3, 11), 2),
            (date(2026, 3, 14), 1),
        ]


class TestStreaks:
    """Tests for whole-house streaks."""

    def complete_on(self, storage, clock, task_id, days_ago):
        now = clock.now
        clock.now = now - timedelta(days=days_ago)
        storage.complete_task(task_id)
        clock.now = now

    def test_no_completions(self, storage):
        assert storage.current_cleaning_streak() == 0
        assert storage.longest_cleaning_streak() == 0

    def test_consecutive_days_including_today(self, storage, kitchen_id, clock):
        task_id = storage.insert_task(kitchen_id, "Dishes", TaskFrequency.DAILY)
        for days_ago in (0, 1, 2, 3):
            self.complete_on(storage, clock, task_id, days_ago)
        assert storage.current_cleaning_streak() == 4

    def test_today_pending_does_not_break_streak(self, storage, kitchen_id, clock):
        task_id = storage.insert_task(kitchen_id, "Dishes", TaskFrequency.DAILY)
        for days_ago in (1, 2):
            self.complete_on(storage, clock, task_id, days_ago)
        assert storage.current_cleaning_streak() == 2

    def test_streak_broken(self, storage, kitchen_id, clock):
        task_id = storage.insert_task(kitchen_id, "Dishes", TaskFrequency.DAILY)
        self.complete_on(storage, clock, task_id, 2)
        assert storage.current_cleaning_streak() == 0
        assert storage.longest_cleaning_streak() == 1

    def test_longest_streak(self, storage, kitchen_id, clock):
        task_id = storage.insert_task(kitchen_id, "Dishes", TaskFrequency.DAILY)
        for days_ago in (20, 19, 18, 17, 5, 4, 0):
            self.complete_on(storage, clock, task_id, days_ago)
        assert storage.longest_cleaning_streak() == 4
        assert storage.current_cleaning_streak() == 1


class TestSnapshots:
    """Tests for snapshot storage."""

    def test_insert_and_fetch(self, storage, kitchen_id, clock):
        storage.insert_item(kitchen_id, "Mug", category=ItemCategory.KEEP)
        storage.insert_item(kitchen_id, "Sofa", is_furniture=True)
        first = storage.insert_snapshot(kitchen_id, storage.fetch_items(kitchen_id))
        clock.advance(days=1)
        storage.insert_item(kitchen_id, "Pan", category=ItemCategory.TRASH)
        second = storage.insert_snapshot(kitchen_id, storage.fetch_items(kitchen_id))

        snaps = storage.fetch_snapshots(kitchen_id)
        assert [s.id for s in snaps] == [second, first]
        assert snaps[0].total_items == 3
        assert snaps[0].trash_count == 1
        assert snaps[1].furniture_count == 1
        assert snaps[1].snapshot_date == datetime(2026, 3, 14, 10, 30)

    def test_fetch_all_snapshots(self, storage, kitchen_id):
        garage = storage.insert_room("Garage", RoomIcon.GARAGE)
        storage.insert_snapshot(kitchen_id, [])
        storage.insert_snapshot(garage, [])
        assert len(storage.fetch_all_snapshots()) == 2
        assert len(storage.fetch_snapshots(garage)) == 1


class TestFailurePolicy:
    """Tests for degraded results when the database fails."""

    def test_unavailable_database_degrades(self, tmp_path, clock):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        client = SQLiteClient(path=str(blocker / "home.sqlite"), clock=clock)
        storage = SQLiteHomeStorage(client)

        with capture_logs() as logs:
            assert storage.fetch_all_rooms() == []
            assert storage.insert_room("Den", RoomIcon.OTHER) is None
            assert storage.total_room_count() == 0
            assert storage.update_room(1, name="x") is False
            assert storage.count_items_by_category() == {c: 0 for c in ItemCategory}

        events = [entry["event"] for entry in logs]
        assert "database_setup_failed" in events
        assert "fetch_all_rooms_failed" in events
        assert "insert_room_failed" in events

    def test_setup_is_not_retried(self, tmp_path, clock):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        client = SQLiteClient(path=str(blocker / "home.sqlite"), clock=clock)
        with pytest.raises(DatabaseUnavailableError):
            client.connect()
        with capture_logs() as logs:
            with pytest.raises(DatabaseUnavailableError):
                client.connect()
        assert not any(entry["event"] == "database_setup_failed" for entry in logs)

    def test_malformed_timestamp_degrades(self, storage, client, kitchen_id):
        storage.insert_item(kitchen_id, "Mug")
        with client.connect() as conn:
            conn.execute("UPDATE declutter_items SET created_at = 'not-a-date'")

        with capture_logs() as logs:
            assert storage.fetch_items(kitchen_id) == []

        assert logs[0]["event"] == "fetch_items_failed"
        assert "error" in logs[0]

    def test_invalid_snapshot_row_degrades(self, storage, client, kitchen_id):
        storage.insert_snapshot(kitchen_id, [])
        with client.connect() as conn:
            conn.execute("UPDATE state_snapshots SET total_items = -3")

        with capture_logs() as logs:
            assert storage.fetch_snapshots(kitchen_id) == []

        assert logs[0]["event"] == "fetch_snapshots_failed"

    def test_query_error_is_logged_with_error(self, storage, client, kitchen_id):
        client.connect().close()
        with capture_logs() as logs:
            assert storage.fetch_items(kitchen_id) == []
            assert storage.current_cleaning_streak() == 0
        assert logs[0]["event"] == "fetch_items_failed"
        assert logs[0]["log_level"] == "error"
        assert "error" in logs[0]
