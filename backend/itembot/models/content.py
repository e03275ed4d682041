# itembot/models/content.py
"""
Generated content artifacts and administrator broadcasts.
"""
from .base import StoreRecord, Timestamp


class PostScenario(StoreRecord):
    """Video post scenario assigned to a user; consumed into a Caption."""
    id: int
    user_id: int
    scenario_number: int
    content: str = ""


class Plan(StoreRecord):
    """Content plan; at most one per user, overwritten on save."""
    id: int
    user_id: int
    content: str = ""
    timestamp: Timestamp


class Report(StoreRecord):
    """Performance report; append-only history per user."""
    id: int
    user_id: int
    content: str = ""
    timestamp: Timestamp


class Caption(StoreRecord):
    id: int
    user_id: int
    title: str = ""
    content: str = ""
    original_scenario_content: str = ""


class PostIdea(StoreRecord):
    """Idea submitted by a user, waiting for an operator to pick it up."""
    id: int
    user_id: int
    idea_text: str = ""


class BroadcastMessage(StoreRecord):
    """Global admin message; only the latest one is surfaced."""
    id: int
    message: str = ""
    timestamp: Timestamp
