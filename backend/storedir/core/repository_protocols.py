"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via constructor injection (CatalogService)
    - Store records cross the boundary as plain dicts without a "reviews" key

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO; core functions that consume
      their results stay synchronous
"""

from typing import Protocol

from storedir.core.domain_types import StoreFilter, StoreId, UserId


class StoreRepository(Protocol):
    """Contract for store persistence and raw store reads."""
    async def create(self, store_data: dict) -> dict: ...
    async def update(self, store_id: StoreId, changes: dict) -> dict: ...
    async def get_by_slug(self, slug: str) -> dict | None: ...
    async def get_by_id(self, store_id: StoreId) -> dict | None: ...
    async def find(self, store_filter: StoreFilter) -> tuple[list[dict], int]: ...
    async def find_slugs_like(self, base: str) -> list[str]: ...
    async def search(self, query: str, limit: int) -> list[dict]: ...
    async def find_near(
        self, lng: float, lat: float, max_distance_m: float, limit: int,
    ) -> list[dict]: ...
    async def with_tag(self, tag: str | None) -> list[dict]: ...
    async def tag_lists(self) -> list[list[str]]: ...
    async def summaries(self) -> list[dict]: ...


class ReviewRepository(Protocol):
    """Contract for the review data source; reviews reference stores by id."""
    async def for_stores(self, store_ids: list[StoreId]) -> list[dict]: ...
    async def ratings(self) -> list[dict]: ...
    async def add(self, review_data: dict) -> dict: ...


class UserResolver(Protocol):
    """Contract for author existence checks; profile management lives elsewhere."""
    async def exists(self, user_id: UserId) -> bool: ...
