"""Catalog Service: façade over slug assignment, review materialization and aggregation.

Invariants:
    - Input validated before any write; validation failures persist nothing
    - Slug recomputed only when the trimmed name actually changes
    - Every store-returning read passes through MaterializedStoreReader
    - get_store / get_store_by_id return None for absent records (not an error)
    - DuplicateSlugError from the repository propagates to the caller unchanged
    - Aggregations are recomputed per call; nothing is cached

Design Decisions:
    - Repositories injected through the constructor; the service holds no
      global state and one instance lives for one request
    - Aggregations fetch light projections and run the pure pipelines from
      core/aggregations.py in process
"""

import logging

from storedir.core import aggregations
from storedir.core.domain_types import (
    DEFAULT_TOP_STORES_LIMIT, StoreFilter, StoreId, UserId,
)
from storedir.core.enforce_store import (
    check_rating, validate_store_changes, validate_store_input,
)
from storedir.core.errors import InputValidationError, ResourceNotFoundError
from storedir.core.repository_protocols import (
    ReviewRepository, StoreRepository, UserResolver,
)
from storedir.core.slugs import name_changed
from storedir.services.assign_slug import assign_slug
from storedir.services.materialize_reviews import (
    MaterializedStoreReader, ReviewMaterializer,
)

logger = logging.getLogger(__name__)


class CatalogService:
    """Create/read/aggregate operations on stores for the HTTP layer."""

    def __init__(
        self,
        stores: StoreRepository,
        reviews: ReviewRepository,
        users: UserResolver,
    ):
        self._stores = stores
        self._reviews = reviews
        self._users = users
        self._materializer = ReviewMaterializer(reviews)
        self._reader = MaterializedStoreReader(stores, self._materializer)

    # ─── Writes ──────────────────────────────────────────────────

    async def create_store(self, data: dict) -> dict:
        """Validate, assign a slug, persist. Returns the store with reviews=[]."""
        store_data = validate_store_input(data)
        if not await self._users.exists(store_data["author_id"]):
            raise InputValidationError("Unknown author", "author_id")

        store_data["slug"] = await assign_slug(store_data["name"], self._stores)
        store = await self._stores.create(store_data)
        logger.info(
            f"Store created: {store['name']}",
            extra={"store_id": str(store["id"]), "slug": store["slug"]},
        )
        return await self._materializer.materialize_one(store)

    async def update_store(self, store_id: StoreId, changes: dict) -> dict:
        """Apply a partial update; slug follows the name only when it changes."""
        cleaned = validate_store_changes(changes)
        current = await self._stores.get_by_id(store_id)
        if current is None:
            raise ResourceNotFoundError("Store", str(store_id))

        is_name_changing = name_changed(cleaned.get("name"), current["name"])
        slug = await assign_slug(
            cleaned.get("name") or current["name"], self._stores,
            current_slug=current["slug"],
            is_name_changing=is_name_changing,
        )
        if slug != current["slug"]:
            cleaned["slug"] = slug
        if not is_name_changing:
            cleaned.pop("name", None)

        if not cleaned:
            return await self._materializer.materialize_one(current)

        store = await self._stores.update(store_id, cleaned)
        logger.info(
            f"Store updated: {store['name']}",
            extra={"store_id": str(store_id), "slug": store["slug"]},
        )
        return await self._materializer.materialize_one(store)

    async def add_review(
        self,
        store_id: StoreId,
        rating: int,
        text: str | None = None,
        author_id: UserId | None = None,
    ) -> dict:
        rating = check_rating(rating)
        if await self._stores.get_by_id(store_id) is None:
            raise ResourceNotFoundError("Store", str(store_id))
        return await self._reviews.add({
            "store_id": store_id,
            "author_id": author_id,
            "rating": rating,
            "text": text.strip() if text else None,
        })

    # ─── Reads ───────────────────────────────────────────────────

    async def get_store(self, slug: str) -> dict | None:
        return await self._reader.get_by_slug(slug.strip().lower())

    async def get_store_by_id(self, store_id: StoreId) -> dict | None:
        return await self._reader.get_by_id(store_id)

    async def list_stores(self, store_filter: StoreFilter | None = None) -> dict:
        """Paginated listing: {"stores", "total", "page", "pages"}."""
        store_filter = store_filter or StoreFilter()
        if store_filter.page < 1:
            raise InputValidationError("page must be 1 or greater", "page")
        if store_filter.page_size < 1:
            raise InputValidationError("page_size must be 1 or greater", "page_size")
        stores, total = await self._reader.find(store_filter)
        return {
            "stores": stores,
            "total": total,
            "page": store_filter.page,
            "pages": -(-total // store_filter.page_size),
        }

    async def search_stores(self, query: str, limit: int = 5) -> list[dict]:
        aggregations.check_limit(limit)
        return await self._reader.search(query, limit)

    async def nearby_stores(
        self,
        lng: float,
        lat: float,
        max_distance_m: float = 10_000,
        limit: int = 10,
    ) -> list[dict]:
        aggregations.check_limit(limit)
        if max_distance_m <= 0:
            raise InputValidationError(
                "max_distance_m must be positive", "max_distance_m",
            )
        return await self._reader.find_near(lng, lat, max_distance_m, limit)

    # ─── Aggregations ────────────────────────────────────────────

    async def tag_counts(self) -> list[dict]:
        return aggregations.tag_counts(await self._stores.tag_lists())

    async def stores_by_tag(self, tag: str | None = None) -> dict:
        """Tag report alongside the stores carrying tag (any tag when None)."""
        return {
            "tags": await self.tag_counts(),
            "stores": await self._reader.with_tag(tag),
        }

    async def top_stores(self, limit: int = DEFAULT_TOP_STORES_LIMIT) -> list[dict]:
        ranked = aggregations.top_stores(
            await self._stores.summaries(),
            await self._reviews.ratings(),
            limit,
        )
        return await self._materializer.materialize(ranked)
