"""Review Materializer: attaches reviews to every store read.

Invariants:
    - Every store returned by MaterializedStoreReader carries "reviews"
      (possibly empty), recomputed on each read, never persisted
    - One review query per read call, regardless of how many stores it returns
    - Reads that return nothing issue no review query

Design Decisions:
    - MaterializedStoreReader wraps the raw StoreRepository read methods; the
      CatalogService only reads through it, so no call site can skip the step
    - Writes and aggregation scans stay on the raw repository
"""

from storedir.core.domain_types import StoreFilter, StoreId
from storedir.core.relations import attach_reviews
from storedir.core.repository_protocols import ReviewRepository, StoreRepository


class ReviewMaterializer:
    """Fetches and attaches reviews for a batch of stores."""

    def __init__(self, reviews: ReviewRepository):
        self.reviews = reviews

    async def materialize(self, stores: list[dict]) -> list[dict]:
        if not stores:
            return []
        reviews = await self.reviews.for_stores([s["id"] for s in stores])
        return attach_reviews(stores, reviews)

    async def materialize_one(self, store: dict | None) -> dict | None:
        if store is None:
            return None
        return (await self.materialize([store]))[0]


class MaterializedStoreReader:
    """Read side of a StoreRepository with reviews attached to every result."""

    def __init__(self, stores: StoreRepository, materializer: ReviewMaterializer):
        self._stores = stores
        self._materializer = materializer

    async def get_by_slug(self, slug: str) -> dict | None:
        return await self._materializer.materialize_one(
            await self._stores.get_by_slug(slug),
        )

    async def get_by_id(self, store_id: StoreId) -> dict | None:
        return await self._materializer.materialize_one(
            await self._stores.get_by_id(store_id),
        )

    async def find(self, store_filter: StoreFilter) -> tuple[list[dict], int]:
        items, total = await self._stores.find(store_filter)
        return await self._materializer.materialize(items), total

    async def with_tag(self, tag: str | None) -> list[dict]:
        return await self._materializer.materialize(
            await self._stores.with_tag(tag),
        )

    async def search(self, query: str, limit: int) -> list[dict]:
        return await self._materializer.materialize(
            await self._stores.search(query, limit),
        )

    async def find_near(
        self, lng: float, lat: float, max_distance_m: float, limit: int,
    ) -> list[dict]:
        return await self._materializer.materialize(
            await self._stores.find_near(lng, lat, max_distance_m, limit),
        )
