"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - StoreId, ReviewId, UserId wrap UUIDs; Slug wraps str
    - Rating is bounded MIN_RATING..MAX_RATING
    - StoreFilter page is 1-based, page_size >= 1

Design Decisions:
    - NewType over dataclass wrappers for identities: zero runtime cost
    - StoreFilter as frozen dataclass: passed from routes to repository unchanged
"""

from dataclasses import dataclass
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

StoreId = NewType("StoreId", UUID)
ReviewId = NewType("ReviewId", UUID)
UserId = NewType("UserId", UUID)
Slug = NewType("Slug", str)


# ─── Value Types ─────────────────────────────────────────────────

Rating = NewType("Rating", int)     # MIN_RATING–MAX_RATING

MIN_RATING = 1
MAX_RATING = 5

DEFAULT_TOP_STORES_LIMIT = 10
DEFAULT_PAGE_SIZE = 6


@dataclass(frozen=True)
class StoreFilter:
    """Criteria for list_stores. None means no constraint on that field."""
    tag: str | None = None
    author_id: UserId | None = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size
