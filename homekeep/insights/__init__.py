"""
Insights Package

Read-only views computed from the loaded rooms.
"""

from homekeep.insights.recommendations import (
    RecommendationOverview,
    RoomRecommendation,
    recommend_rooms,
    summarize_recommendations,
)
from homekeep.insights.status_report import (
    REPORT_TITLE,
    render_status_report,
    room_status,
)

__all__ = [
    "RecommendationOverview",
    "RoomRecommendation",
    "recommend_rooms",
    "summarize_recommendations",
    "REPORT_TITLE",
    "render_status_report",
    "room_status",
]
