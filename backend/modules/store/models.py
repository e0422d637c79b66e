"""
Record store data models.

Canonical keys for every collection the application persists. Each logical
entity lives under exactly one key; worklists and statistics are derived
on read.
"""

from enum import Enum
from typing import Any


class CollectionKey(str, Enum):
    """Canonical record store keys."""

    USERS = "users"
    INSTITUTES = "institutes"
    ADMIN = "admin"
    COURSES = "courses"
    REVIEWS = "reviews"
    ENQUIRIES = "enquiries"
    SESSION = "session"


# Keys holding arrays; everything else is a singleton (None when absent)
LIST_KEYS = frozenset({
    CollectionKey.USERS.value,
    CollectionKey.INSTITUTES.value,
    CollectionKey.COURSES.value,
    CollectionKey.REVIEWS.value,
    CollectionKey.ENQUIRIES.value,
})


def default_for(key: str) -> Any:
    """Value returned for a missing or unreadable key."""
    return [] if key in LIST_KEYS else None
