"""
Application wiring

Builds the storage gateway, the leaf services and the managers from
configuration, and performs the launch-time work: load rooms and due
tasks, then plan reminders for the coming week.
"""

from datetime import datetime
from typing import Callable, NamedTuple, Optional

from homekeep.config import get_settings, validate_all_settings
from homekeep.log import configure_logging, get_logger
from homekeep.managers import (
    CleaningManager,
    DeclutterManager,
    ProgressManager,
    RoomManager,
    SnapshotManager,
)
from homekeep.services.notifications import NotificationScheduler, ReminderBackend
from homekeep.services.photos import PhotoStorageService
from homekeep.services.storage import (
    HomeStorageInterface,
    SQLiteClient,
    SQLiteHomeStorage,
)


logger = get_logger(__name__)


class AppComponents(NamedTuple):
    storage: HomeStorageInterface
    photos: PhotoStorageService
    scheduler: NotificationScheduler
    rooms: RoomManager
    declutter: DeclutterManager
    cleaning: CleaningManager
    progress: ProgressManager
    snapshots: SnapshotManager


def create_app_components(
    storage: Optional[HomeStorageInterface] = None,
    reminder_backend: Optional[ReminderBackend] = None,
    clock: Callable[[], datetime] = datetime.now,
    schedule_reminders: bool = True,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        storage: Gateway to use instead of the configured SQLite file
        reminder_backend: Where reminders go (in-memory by default)
        clock: Source of "now" for due status, streaks and reminders
        schedule_reminders: Plan reminders for the loaded tasks on startup

    Returns:
        The wired components, with rooms and due tasks already loaded
    """
    settings = get_settings()
    app_settings = settings.app
    if app_settings.debug_mode:
        configure_logging("DEBUG", json_logs=False)
    else:
        configure_logging(app_settings.log_level, app_settings.log_json)

    for name, valid in validate_all_settings().items():
        if valid is False:
            logger.warning("settings_invalid", group=name)

    if storage is None:
        storage = SQLiteHomeStorage(SQLiteClient(clock=clock))

    photos = PhotoStorageService(settings.photos)
    scheduler = NotificationScheduler(
        backend=reminder_backend,
        settings=settings.notifications,
        clock=clock,
    )

    components = AppComponents(
        storage=storage,
        photos=photos,
        scheduler=scheduler,
        rooms=RoomManager(storage),
        declutter=DeclutterManager(storage, photos=photos),
        cleaning=CleaningManager(storage, scheduler=scheduler, clock=clock),
        progress=ProgressManager(storage, daily_counts_window=app_settings.daily_counts_window),
        snapshots=SnapshotManager(storage),
    )

    components.rooms.load_rooms()
    components.cleaning.load_due_tasks()
    if schedule_reminders:
        components.cleaning.reschedule_reminders()

    logger.info(
        "app_started",
        environment=app_settings.app_environment,
        rooms=len(components.rooms.rooms),
        due_tasks=len(components.cleaning.due_tasks),
    )
    return components
