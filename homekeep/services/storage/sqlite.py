"""
SQLite Storage Implementation

One embedded database file holds everything: rooms, declutter items,
cleaning tasks, their completion logs and room snapshots. Children
reference their parent with ``ON DELETE CASCADE`` so deleting a room
removes its whole subtree in one statement.

Timestamps are stored as local ISO strings (``YYYY-MM-DD HH:MM:SS``) so
SQLite's ``date()`` can group them by calendar day and plain string
comparison orders them.

Query failures never reach the caller. Each public method is wrapped by
``logged_failure``, which logs ``<method>_failed`` with the error and
returns an empty default.
"""

import functools
import sqlite3
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Callable, Iterable, Optional

from homekeep.config import get_settings
from homekeep.log import get_logger
from homekeep.models.home import (
    DEFAULT_ROOMS,
    CleaningLog,
    CleaningTask,
    DeclutterItem,
    ItemCategory,
    Room,
    RoomIcon,
    TaskFrequency,
)
from homekeep.models.progress import DailyCompletionCount, StateSnapshot
from homekeep.services.storage.interface import (
    DatabaseUnavailableError,
    HomeStorageInterface,
    NotFoundError,
    StorageError,
)
from homekeep.snapshots import tally_items
from homekeep.status import current_streak, is_due, longest_streak


logger = get_logger(__name__)

Clock = Callable[[], datetime]

SCHEMA = """
CREATE TABLE IF NOT EXISTS rooms (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    icon TEXT NOT NULL,
    is_decluttered INTEGER NOT NULL DEFAULT 0,
    sort_order INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS declutter_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    room_id INTEGER NOT NULL REFERENCES rooms(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    category TEXT NOT NULL DEFAULT 'uncategorized',
    is_furniture INTEGER NOT NULL DEFAULT 0,
    photo_path TEXT,
    notes TEXT,
    sort_order INTEGER NOT NULL DEFAULT 0,
    auto_group TEXT,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS cleaning_tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    room_id INTEGER NOT NULL REFERENCES rooms(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    frequency TEXT NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS cleaning_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    task_id INTEGER NOT NULL REFERENCES cleaning_tasks(id) ON DELETE CASCADE,
    completed_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS state_snapshots (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    room_id INTEGER NOT NULL REFERENCES rooms(id) ON DELETE CASCADE,
    snapshot_date TEXT NOT NULL,
    total_items INTEGER NOT NULL DEFAULT 0,
    categorized_count INTEGER NOT NULL DEFAULT 0,
    keep_count INTEGER NOT NULL DEFAULT 0,
    donate_count INTEGER NOT NULL DEFAULT 0,
    trash_count INTEGER NOT NULL DEFAULT 0,
    sell_count INTEGER NOT NULL DEFAULT 0,
    furniture_count INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_declutter_items_room_id ON declutter_items(room_id);
CREATE INDEX IF NOT EXISTS idx_cleaning_tasks_room_id ON cleaning_tasks(room_id);
CREATE INDEX IF NOT EXISTS idx_cleaning_logs_task_id ON cleaning_logs(task_id);
CREATE INDEX IF NOT EXISTS idx_cleaning_logs_completed_at ON cleaning_logs(completed_at);
CREATE INDEX IF NOT EXISTS idx_state_snapshots_room_id ON state_snapshots(room_id);
"""

# Columns added after the first release; older files get them on open.
MIGRATED_COLUMNS = {
    "declutter_items": {
        "is_furniture": "INTEGER NOT NULL DEFAULT 0",
        "sort_order": "INTEGER NOT NULL DEFAULT 0",
        "auto_group": "TEXT",
    },
}

# Enum values are fixed, so they can be inlined into SQL.
CATEGORIZED_SQL = ", ".join(f"'{c.value}'" for c in ItemCategory.dispositions())


def to_db_timestamp(value: datetime) -> str:
    return value.isoformat(sep=" ", timespec="seconds")


def from_db_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def _ensure_columns(conn: sqlite3.Connection, table: str, columns: dict[str, str]) -> None:
    existing = {r["name"] for r in conn.execute(f"PRAGMA table_info({table})").fetchall()}
    for name, ddl in columns.items():
        if name in existing:
            continue
        conn.execute(f"ALTER TABLE {table} ADD COLUMN {name} {ddl}")


def logged_failure(default_factory: Callable[[], object]):
    """
    Turn storage errors into a logged event and an empty result.

    ``ValueError`` covers rows that no longer map onto a model (a bad
    timestamp, or a count that fails validation).

    The event is named after the wrapped method, e.g. ``fetch_items_failed``.
    """
    def decorator(method):
        event = f"{method.__name__}_failed"

        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            try:
                return method(self, *args, **kwargs)
            except (sqlite3.Error, StorageError, ValueError) as e:
                logger.error(event, error=str(e))
                return default_factory()

        return wrapper

    return decorator


def _none() -> None:
    return None


def _empty_category_counts() -> dict[ItemCategory, int]:
    return {category: 0 for category in ItemCategory}


class SQLiteClient:
    """
    Owns the single SQLite connection.

    The database is opened lazily on first use. Opening creates the
    tables, applies column migrations and seeds the default rooms into
    an empty database. If any of that fails the client stays unavailable
    and every later ``connect()`` raises ``DatabaseUnavailableError``.
    """

    def __init__(
        self,
        path: Optional[str] = None,
        seed_default_rooms: Optional[bool] = None,
        clock: Clock = datetime.now,
    ):
        settings = get_settings().database
        self.path = path or settings.path
        self.seed_default_rooms = (
            settings.seed_default_rooms if seed_default_rooms is None else seed_default_rooms
        )
        self.clock = clock
        self._conn: Optional[sqlite3.Connection] = None
        self._setup_error: Optional[str] = None

    def connect(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn
        if self._setup_error is not None:
            raise DatabaseUnavailableError(f"Database unavailable: {self._setup_error}")

        conn = None
        target = self.path
        try:
            if target != ":memory:":
                db_file = Path(target).expanduser()
                db_file.parent.mkdir(parents=True, exist_ok=True)
                target = str(db_file)
            # Streamlit reruns the script on a worker thread; access stays serial.
            conn = sqlite3.connect(target, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            self._create_tables(conn)
            if self.seed_default_rooms:
                self._seed_default_rooms(conn)
        except (sqlite3.Error, OSError) as e:
            if conn is not None:
                conn.close()
            self._setup_error = str(e)
            logger.error("database_setup_failed", path=self.path, error=str(e))
            raise DatabaseUnavailableError(f"Failed to open database {self.path}: {e}")

        logger.info("database_opened", path=self.path)
        self._conn = conn
        return conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _create_tables(self, conn: sqlite3.Connection) -> None:
        with conn:
            conn.executescript(SCHEMA)
            for table, columns in MIGRATED_COLUMNS.items():
                _ensure_columns(conn, table, columns)

    def _seed_default_rooms(self, conn: sqlite3.Connection) -> None:
        count = conn.execute("SELECT COUNT(*) FROM rooms").fetchone()[0]
        if count:
            return

        created_at = to_db_timestamp(self.clock())
        with conn:
            conn.executemany(
                "INSERT INTO rooms (name, icon, is_decluttered, sort_order, created_at) "
                "VALUES (?, ?, 0, ?, ?)",
                [
                    (name, icon.value, index, created_at)
                    for index, (name, icon) in enumerate(DEFAULT_ROOMS)
                ],
            )
        logger.info("default_rooms_seeded", count=len(DEFAULT_ROOMS))


class SQLiteHomeStorage(HomeStorageInterface):
    """
    SQLite implementation of the home storage gateway.

    Derived values (room counts, task due status and streaks) are
    computed on every read from the current rows and the injected clock.
    """

    def __init__(
        self,
        client: Optional[SQLiteClient] = None,
        clock: Optional[Clock] = None,
    ):
        self._client = client or SQLiteClient()
        self._clock = clock or self._client.clock

    def _conn(self) -> sqlite3.Connection:
        return self._client.connect()

    def _today(self) -> date:
        return self._clock().date()

    # -------------------------------------------------------------------------
    # Row mapping
    # -------------------------------------------------------------------------

    def _row_to_item(self, row: sqlite3.Row) -> DeclutterItem:
        return DeclutterItem(
            id=row["id"],
            room_id=row["room_id"],
            name=row["name"],
            category=ItemCategory.parse(row["category"]),
            is_furniture=bool(row["is_furniture"]),
            photo_path=row["photo_path"],
            notes=row["notes"],
            sort_order=row["sort_order"],
            auto_group=row["auto_group"],
            created_at=from_db_timestamp(row["created_at"]),
        )

    def _row_to_log(self, row: sqlite3.Row) -> CleaningLog:
        return CleaningLog(
            id=row["id"],
            task_id=row["task_id"],
            completed_at=from_db_timestamp(row["completed_at"]),
        )

    def _row_to_snapshot(self, row: sqlite3.Row) -> StateSnapshot:
        return StateSnapshot(
            id=row["id"],
            room_id=row["room_id"],
            snapshot_date=from_db_timestamp(row["snapshot_date"]),
            total_items=row["total_items"],
            categorized_count=row["categorized_count"],
            keep_count=row["keep_count"],
            donate_count=row["donate_count"],
            trash_count=row["trash_count"],
            sell_count=row["sell_count"],
            furniture_count=row["furniture_count"],
            created_at=from_db_timestamp(row["created_at"]),
        )

    def _row_to_task(self, conn: sqlite3.Connection, row: sqlite3.Row) -> CleaningTask:
        """Build a task and derive its last completion, due flag and streak."""
        frequency = TaskFrequency.parse(row["frequency"])
        now = self._clock()

        days = {
            date.fromisoformat(r["day"])
            for r in conn.execute(
                "SELECT DISTINCT date(completed_at) AS day FROM cleaning_logs WHERE task_id = ?",
                (row["id"],),
            )
        }
        last = conn.execute(
            "SELECT MAX(completed_at) FROM cleaning_logs WHERE task_id = ?",
            (row["id"],),
        ).fetchone()[0]
        last_completed = from_db_timestamp(last) if last else None

        return CleaningTask(
            id=row["id"],
            room_id=row["room_id"],
            name=row["name"],
            frequency=frequency,
            is_active=bool(row["is_active"]),
            created_at=from_db_timestamp(row["created_at"]),
            room_name=row["room_name"] or "",
            room_icon=RoomIcon.parse(row["room_icon"]),
            last_completed=last_completed,
            is_due_today=is_due(last_completed, frequency, now),
            current_streak=current_streak(days.__contains__, now.date()),
        )

    def _active_tasks_in_room(self, conn: sqlite3.Connection, room_id: int) -> list[CleaningTask]:
        rows = conn.execute(
            """
            SELECT t.*, r.name AS room_name, r.icon AS room_icon
            FROM cleaning_tasks t
            JOIN rooms r ON r.id = t.room_id
            WHERE t.room_id = ? AND t.is_active = 1
            ORDER BY t.name
            """,
            (room_id,),
        ).fetchall()
        return [self._row_to_task(conn, row) for row in rows]

    def _row_to_room(self, conn: sqlite3.Connection, row: sqlite3.Row) -> Room:
        """Build a room with its derived counts."""
        room_id = row["id"]
        counts = conn.execute(
            f"""
            SELECT
                (SELECT COUNT(*) FROM declutter_items
                    WHERE room_id = :room) AS item_count,
                (SELECT COUNT(*) FROM declutter_items
                    WHERE room_id = :room AND category IN ({CATEGORIZED_SQL})) AS categorized_count,
                (SELECT COUNT(*) FROM declutter_items
                    WHERE room_id = :room AND is_furniture = 0) AS non_furniture_count,
                (SELECT COUNT(*) FROM declutter_items
                    WHERE room_id = :room AND is_furniture = 0
                    AND category IN ({CATEGORIZED_SQL})) AS non_furniture_categorized_count,
                (SELECT COUNT(*) FROM cleaning_tasks
                    WHERE room_id = :room AND is_active = 1) AS task_count,
                (SELECT COUNT(*) FROM cleaning_logs l
                    JOIN cleaning_tasks t ON t.id = l.task_id
                    WHERE t.room_id = :room AND l.completed_at >= :since) AS completed_today_count
            """,
            {"room": room_id, "since": to_db_timestamp(start_of_day(self._today()))},
        ).fetchone()
        due_today = sum(1 for t in self._active_tasks_in_room(conn, room_id) if t.is_due_today)

        return Room(
            id=room_id,
            name=row["name"],
            icon=RoomIcon.parse(row["icon"]),
            is_decluttered=bool(row["is_decluttered"]),
            sort_order=row["sort_order"],
            created_at=from_db_timestamp(row["created_at"]),
            item_count=counts["item_count"],
            categorized_count=counts["categorized_count"],
            non_furniture_count=counts["non_furniture_count"],
            non_furniture_categorized_count=counts["non_furniture_categorized_count"],
            task_count=counts["task_count"],
            due_today_count=due_today,
            completed_today_count=counts["completed_today_count"],
        )

    def _update_fields(self, table: str, row_id: int, fields: dict) -> bool:
        """UPDATE only the non-None fields of one row."""
        changes = {name: value for name, value in fields.items() if value is not None}
        if not changes:
            return True

        conn = self._conn()
        assignments = ", ".join(f"{name} = ?" for name in changes)
        with conn:
            cursor = conn.execute(
                f"UPDATE {table} SET {assignments} WHERE id = ?",
                (*changes.values(), row_id),
            )
        if cursor.rowcount == 0:
            raise NotFoundError(f"{table} row not found: {row_id}")
        return True

    def _delete_row(self, table: str, row_id: int) -> bool:
        conn = self._conn()
        with conn:
            cursor = conn.execute(f"DELETE FROM {table} WHERE id = ?", (row_id,))
        if cursor.rowcount == 0:
            raise NotFoundError(f"{table} row not found: {row_id}")
        return True

    # -------------------------------------------------------------------------
    # Rooms
    # -------------------------------------------------------------------------

    @logged_failure(list)
    def fetch_all_rooms(self) -> list[Room]:
        conn = self._conn()
        rows = conn.execute("SELECT * FROM rooms ORDER BY sort_order, id").fetchall()
        return [self._row_to_room(conn, row) for row in rows]

    @logged_failure(_none)
    def fetch_room(self, room_id: int) -> Optional[Room]:
        conn = self._conn()
        row = conn.execute("SELECT * FROM rooms WHERE id = ?", (room_id,)).fetchone()
        if row is None:
            return None
        return self._row_to_room(conn, row)

    @logged_failure(_none)
    def insert_room(self, name: str, icon: RoomIcon) -> Optional[int]:
        conn = self._conn()
        with conn:
            next_order = conn.execute(
                "SELECT COALESCE(MAX(sort_order), 0) + 1 FROM rooms"
            ).fetchone()[0]
            cursor = conn.execute(
                "INSERT INTO rooms (name, icon, is_decluttered, sort_order, created_at) "
                "VALUES (?, ?, 0, ?, ?)",
                (name, icon.value, next_order, to_db_timestamp(self._clock())),
            )
        logger.info("room_created", room_id=cursor.lastrowid, icon=icon.value)
        return cursor.lastrowid

    @logged_failure(bool)
    def update_room(
        self,
        room_id: int,
        name: Optional[str] = None,
        icon: Optional[RoomIcon] = None,
        is_decluttered: Optional[bool] = None,
    ) -> bool:
        return self._update_fields("rooms", room_id, {
            "name": name,
            "icon": icon.value if icon is not None else None,
            "is_decluttered": int(is_decluttered) if is_decluttered is not None else None,
        })

    @logged_failure(bool)
    def delete_room(self, room_id: int) -> bool:
        self._delete_row("rooms", room_id)
        logger.info("room_deleted", room_id=room_id)
        return True

    @logged_failure(bool)
    def mark_room_decluttered(self, room_id: int) -> bool:
        conn = self._conn()
        seeded = 0
        with conn:
            row = conn.execute(
                "SELECT icon, is_decluttered FROM rooms WHERE id = ?", (room_id,)
            ).fetchone()
            if row is None:
                raise NotFoundError(f"rooms row not found: {room_id}")
            if row["is_decluttered"]:
                return True

            conn.execute("UPDATE rooms SET is_decluttered = 1 WHERE id = ?", (room_id,))
            created_at = to_db_timestamp(self._clock())
            tasks = RoomIcon.parse(row["icon"]).default_cleaning_tasks
            conn.executemany(
                "INSERT INTO cleaning_tasks (room_id, name, frequency, is_active, created_at) "
                "VALUES (?, ?, ?, 1, ?)",
                [(room_id, name, frequency.value, created_at) for name, frequency in tasks],
            )
            seeded = len(tasks)
        logger.info("room_decluttered", room_id=room_id, tasks_seeded=seeded)
        return True

    @logged_failure(bool)
    def reorder_rooms(self, room_ids: list[int]) -> bool:
        conn = self._conn()
        with conn:
            conn.executemany(
                "UPDATE rooms SET sort_order = ? WHERE id = ?",
                [(index, room_id) for index, room_id in enumerate(room_ids)],
            )
        return True

    # -------------------------------------------------------------------------
    # Declutter items
    # -------------------------------------------------------------------------

    @logged_failure(list)
    def fetch_items(self, room_id: int) -> list[DeclutterItem]:
        rows = self._conn().execute(
            "SELECT * FROM declutter_items WHERE room_id = ? ORDER BY created_at DESC, id DESC",
            (room_id,),
        ).fetchall()
        return [self._row_to_item(row) for row in rows]

    def _next_item_order(self, conn: sqlite3.Connection, room_id: int) -> int:
        return conn.execute(
            "SELECT COALESCE(MAX(sort_order), 0) + 1 FROM declutter_items WHERE room_id = ?",
            (room_id,),
        ).fetchone()[0]

    @logged_failure(_none)
    def insert_item(
        self,
        room_id: int,
        name: str,
        category: ItemCategory = ItemCategory.UNCATEGORIZED,
        is_furniture: bool = False,
        photo_path: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Optional[int]:
        conn = self._conn()
        with conn:
            cursor = conn.execute(
                """
                INSERT INTO declutter_items
                    (room_id, name, category, is_furniture, photo_path, notes, sort_order, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    room_id,
                    name,
                    category.value,
                    int(is_furniture),
                    photo_path,
                    notes,
                    self._next_item_order(conn, room_id),
                    to_db_timestamp(self._clock()),
                ),
            )
        return cursor.lastrowid

    @logged_failure(int)
    def insert_items(self, room_id: int, names: Iterable[str]) -> int:
        names = [n.strip() for n in names if n and n.strip()]
        if not names:
            return 0

        conn = self._conn()
        created_at = to_db_timestamp(self._clock())
        with conn:
            first_order = self._next_item_order(conn, room_id)
            conn.executemany(
                """
                INSERT INTO declutter_items
                    (room_id, name, category, is_furniture, sort_order, created_at)
                VALUES (?, ?, ?, 0, ?, ?)
                """,
                [
                    (room_id, name, ItemCategory.UNCATEGORIZED.value, first_order + offset, created_at)
                    for offset, name in enumerate(names)
                ],
            )
        logger.info("items_inserted", room_id=room_id, count=len(names))
        return len(names)

    @logged_failure(bool)
    def update_item_category(self, item_id: int, category: ItemCategory) -> bool:
        return self._update_fields("declutter_items", item_id, {"category": category.value})

    @logged_failure(bool)
    def update_item(
        self,
        item_id: int,
        name: Optional[str] = None,
        category: Optional[ItemCategory] = None,
        is_furniture: Optional[bool] = None,
        photo_path: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> bool:
        return self._update_fields("declutter_items", item_id, {
            "name": name,
            "category": category.value if category is not None else None,
            "is_furniture": int(is_furniture) if is_furniture is not None else None,
            "photo_path": photo_path,
            "notes": notes,
        })

    @logged_failure(bool)
    def update_item_furniture(self, item_id: int, is_furniture: bool) -> bool:
        return self._update_fields("declutter_items", item_id, {"is_furniture": int(is_furniture)})

    @logged_failure(bool)
    def delete_item(self, item_id: int) -> bool:
        return self._delete_row("declutter_items", item_id)

    @logged_failure(bool)
    def update_item_sort_orders(self, positions: Iterable[tuple[int, int]]) -> bool:
        conn = self._conn()
        with conn:
            conn.executemany(
                "UPDATE declutter_items SET sort_order = ? WHERE id = ?",
                [(order, item_id) for item_id, order in positions],
            )
        return True

    @logged_failure(bool)
    def update_item_groups(self, groups: dict[int, Optional[str]]) -> bool:
        conn = self._conn()
        with conn:
            conn.executemany(
                "UPDATE declutter_items SET auto_group = ? WHERE id = ?",
                [(label, item_id) for item_id, label in groups.items()],
            )
        return True

    @logged_failure(bool)
    def clear_item_groups(self, room_id: int) -> bool:
        conn = self._conn()
        with conn:
            conn.execute(
                "UPDATE declutter_items SET auto_group = NULL WHERE room_id = ?", (room_id,)
            )
        return True

    # -------------------------------------------------------------------------
    # Cleaning tasks
    # -------------------------------------------------------------------------

    @logged_failure(list)
    def fetch_tasks(self, room_id: int) -> list[CleaningTask]:
        return self._active_tasks_in_room(self._conn(), room_id)

    @logged_failure(list)
    def fetch_all_active_tasks(self) -> list[CleaningTask]:
        conn = self._conn()
        rows = conn.execute(
            """
            SELECT t.*, r.name AS room_name, r.icon AS room_icon
            FROM cleaning_tasks t
            JOIN rooms r ON r.id = t.room_id
            WHERE t.is_active = 1 AND r.is_decluttered = 1
            ORDER BY r.sort_order, t.name
            """
        ).fetchall()
        return [self._row_to_task(conn, row) for row in rows]

    @logged_failure(list)
    def fetch_due_tasks(self) -> list[CleaningTask]:
        return [task for task in self.fetch_all_active_tasks() if task.is_due_today]

    @logged_failure(_none)
    def insert_task(
        self,
        room_id: int,
        name: str,
        frequency: TaskFrequency,
    ) -> Optional[int]:
        conn = self._conn()
        with conn:
            cursor = conn.execute(
                "INSERT INTO cleaning_tasks (room_id, name, frequency, is_active, created_at) "
                "VALUES (?, ?, ?, 1, ?)",
                (room_id, name, frequency.value, to_db_timestamp(self._clock())),
            )
        return cursor.lastrowid

    @logged_failure(bool)
    def update_task(
        self,
        task_id: int,
        name: Optional[str] = None,
        frequency: Optional[TaskFrequency] = None,
        is_active: Optional[bool] = None,
    ) -> bool:
        return self._update_fields("cleaning_tasks", task_id, {
            "name": name,
            "frequency": frequency.value if frequency is not None else None,
            "is_active": int(is_active) if is_active is not None else None,
        })

    @logged_failure(bool)
    def delete_task(self, task_id: int) -> bool:
        return self._delete_row("cleaning_tasks", task_id)

    # -------------------------------------------------------------------------
    # Completion logs
    # -------------------------------------------------------------------------

    @logged_failure(_none)
    def complete_task(self, task_id: int) -> Optional[int]:
        conn = self._conn()
        with conn:
            cursor = conn.execute(
                "INSERT INTO cleaning_logs (task_id, completed_at) VALUES (?, ?)",
                (task_id, to_db_timestamp(self._clock())),
            )
        logger.info("task_completed", task_id=task_id, log_id=cursor.lastrowid)
        return cursor.lastrowid

    @logged_failure(list)
    def fetch_logs(self, task_id: int, limit: int = 30) -> list[CleaningLog]:
        rows = self._conn().execute(
            "SELECT * FROM cleaning_logs WHERE task_id = ? "
            "ORDER BY completed_at DESC, id DESC LIMIT ?",
            (task_id, limit),
        ).fetchall()
        return [self._row_to_log(row) for row in rows]

    @logged_failure(list)
    def fetch_all_logs(self, since: datetime) -> list[CleaningLog]:
        rows = self._conn().execute(
            "SELECT * FROM cleaning_logs WHERE completed_at >= ? "
            "ORDER BY completed_at DESC, id DESC",
            (to_db_timestamp(since),),
        ).fetchall()
        return [self._row_to_log(row) for row in rows]

    @logged_failure(_none)
    def last_completion(self, task_id: int) -> Optional[datetime]:
        value = self._conn().execute(
            "SELECT MAX(completed_at) FROM cleaning_logs WHERE task_id = ?", (task_id,)
        ).fetchone()[0]
        return from_db_timestamp(value) if value else None

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    @logged_failure(_empty_category_counts)
    def count_items_by_category(self) -> dict[ItemCategory, int]:
        counts = _empty_category_counts()
        rows = self._conn().execute(
            "SELECT category, COUNT(*) AS cnt FROM declutter_items GROUP BY category"
        ).fetchall()
        for row in rows:
            counts[ItemCategory.parse(row["category"])] += row["cnt"]
        return counts

    @logged_failure(int)
    def total_item_count(self) -> int:
        return self._conn().execute("SELECT COUNT(*) FROM declutter_items").fetchone()[0]

    @logged_failure(int)
    def decluttered_room_count(self) -> int:
        return self._conn().execute(
            "SELECT COUNT(*) FROM rooms WHERE is_decluttered = 1"
        ).fetchone()[0]

    @logged_failure(int)
    def total_room_count(self) -> int:
        return self._conn().execute("SELECT COUNT(*) FROM rooms").fetchone()[0]

    def _completion_count(self, conn: sqlite3.Connection, day: date) -> int:
        start = start_of_day(day)
        return conn.execute(
            "SELECT COUNT(*) FROM cleaning_logs WHERE completed_at >= ? AND completed_at < ?",
            (to_db_timestamp(start), to_db_timestamp(start + timedelta(days=1))),
        ).fetchone()[0]

    @logged_failure(int)
    def completion_count(self, day: date) -> int:
        return self._completion_count(self._conn(), day)

    @logged_failure(list)
    def daily_completion_counts(self, days: int = 30) -> list[DailyCompletionCount]:
        since = start_of_day(self._today() - timedelta(days=days))
        rows = self._conn().execute(
            """
            SELECT date(completed_at) AS day, COUNT(*) AS cnt
            FROM cleaning_logs
            WHERE completed_at >= ?
            GROUP BY date(completed_at)
            ORDER BY day
            """,
            (to_db_timestamp(since),),
        ).fetchall()
        return [
            DailyCompletionCount(day=date.fromisoformat(row["day"]), count=row["cnt"])
            for row in rows
        ]

    # -------------------------------------------------------------------------
    # Streaks
    # -------------------------------------------------------------------------

    @logged_failure(int)
    def current_cleaning_streak(self) -> int:
        conn = self._conn()
        return current_streak(
            lambda day: self._completion_count(conn, day) > 0,
            self._today(),
        )

    @logged_failure(int)
    def longest_cleaning_streak(self) -> int:
        rows = self._conn().execute(
            "SELECT DISTINCT date(completed_at) AS day FROM cleaning_logs ORDER BY day"
        ).fetchall()
        return longest_streak(date.fromisoformat(row["day"]) for row in rows)

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    @logged_failure(_none)
    def insert_snapshot(
        self,
        room_id: int,
        items: Iterable[DeclutterItem],
    ) -> Optional[int]:
        counts = tally_items(items)
        now = to_db_timestamp(self._clock())
        conn = self._conn()
        with conn:
            cursor = conn.execute(
                """
                INSERT INTO state_snapshots (
                    room_id, snapshot_date, total_items, categorized_count,
                    keep_count, donate_count, trash_count, sell_count,
                    furniture_count, created_at
                ) VALUES (
                    :room_id, :now, :total_items, :categorized_count,
                    :keep_count, :donate_count, :trash_count, :sell_count,
                    :furniture_count, :now
                )
                """,
                {"room_id": room_id, "now": now, **counts},
            )
        logger.info("snapshot_taken", room_id=room_id, total_items=counts["total_items"])
        return cursor.lastrowid

    @logged_failure(list)
    def fetch_snapshots(self, room_id: int) -> list[StateSnapshot]:
        rows = self._conn().execute(
            "SELECT * FROM state_snapshots WHERE room_id = ? "
            "ORDER BY snapshot_date DESC, id DESC",
            (room_id,),
        ).fetchall()
        return [self._row_to_snapshot(row) for row in rows]

    @logged_failure(list)
    def fetch_all_snapshots(self) -> list[StateSnapshot]:
        rows = self._conn().execute(
            "SELECT * FROM state_snapshots ORDER BY snapshot_date DESC, id DESC"
        ).fetchall()
        return [self._row_to_snapshot(row) for row in rows]
