"""
Shareable plain-text status report: one line per room plus a footer.
"""

from typing import Iterable

from homekeep.models.home import Room


REPORT_TITLE = "Home Status Report"


def percent(ratio: float) -> int:
    """Whole percent, truncated."""
    return int(ratio * 100)


def room_status(room: Room) -> str:
    if room.is_decluttered:
        status = "Decluttered"
        if room.due_today_count > 0:
            status += f", {percent(room.clean_progress)}% cleaned today"
        return status
    if room.non_furniture_count > 0:
        return f"{percent(room.declutter_progress)}% decluttered"
    if room.item_count > 0:
        return f"{room.categorized_count}/{room.item_count} categorized"
    return "Not started"


def render_status_report(rooms: Iterable[Room]) -> str:
    rooms = list(rooms)
    decluttered = sum(1 for r in rooms if r.is_decluttered)
    total_items = sum(r.item_count for r in rooms)

    lines = [REPORT_TITLE, ""]
    lines.extend(f"{room.name}: {room_status(room)}" for room in rooms)
    lines.append("")
    lines.append(f"{decluttered}/{len(rooms)} rooms decluttered")
    lines.append(f"{total_items} items tracked")
    return "\n".join(lines)
