"""
Where to focus next

Ranks the rooms that are not decluttered yet. Lower priority numbers
come first; rooms that match no rule (everything categorized but not yet
marked decluttered) are left out.
"""

from typing import Iterable, Optional

from pydantic import BaseModel, Field

from homekeep.models.home import Room, RoomIcon


class RoomRecommendation(BaseModel):
    room_id: int
    room_name: str
    room_icon: RoomIcon
    reason: str
    priority: int = Field(..., ge=1, le=5, description="1 is the most urgent")
    uncategorized_count: int
    total_items: int


class RecommendationOverview(BaseModel):
    rooms_remaining: int = 0
    items_to_categorize: int = 0
    total_items: int = 0


def _rank(room: Room) -> Optional[tuple[int, str]]:
    uncategorized = room.uncategorized_count
    if uncategorized > 20:
        return 1, (
            f"High volume: {uncategorized} uncategorized items. "
            "Tackling this room will make a big impact."
        )
    if uncategorized > 10:
        return 2, (
            f"{uncategorized} items need categorizing. "
            "A focused session could clear this room."
        )
    if room.item_count > 0 and room.categorized_count == 0:
        return 3, f"Not started yet. {room.item_count} items waiting. Even 10 minutes helps."
    if uncategorized > 0:
        return 4, f"Almost done! Just {uncategorized} items left to categorize."
    if room.item_count == 0:
        return 5, "Empty room. Add items to start decluttering."
    return None


def recommend_rooms(rooms: Iterable[Room]) -> list[RoomRecommendation]:
    """Recommendations for undecluttered rooms, most urgent first."""
    recommendations = []
    for room in rooms:
        if room.is_decluttered:
            continue
        ranked = _rank(room)
        if ranked is None:
            continue
        priority, reason = ranked
        recommendations.append(RoomRecommendation(
            room_id=room.id,
            room_name=room.name,
            room_icon=room.icon,
            reason=reason,
            priority=priority,
            uncategorized_count=room.uncategorized_count,
            total_items=room.item_count,
        ))
    # sorted() is stable, so equal priorities keep room order
    return sorted(recommendations, key=lambda r: r.priority)


def summarize_recommendations(
    recommendations: Iterable[RoomRecommendation],
) -> RecommendationOverview:
    overview = RecommendationOverview()
    for rec in recommendations:
        overview.rooms_remaining += 1
        overview.items_to_categorize += rec.uncategorized_count
        overview.total_items += rec.total_items
    return overview
