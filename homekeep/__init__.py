"""
homekeep - room-by-room decluttering and cleaning tracker

Rooms hold declutter items sorted into keep/donate/trash/sell and
recurring cleaning tasks whose completions build daily streaks.
Everything lives in one local SQLite file.
"""

__version__ = "0.1.0"
