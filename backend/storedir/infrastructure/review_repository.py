"""SQL Review Repository: ReviewRepository Protocol over the reviews table.

Invariants:
    - Returns plain dicts keyed by store_id; no store data is joined here
    - for_stores([]) returns [] without touching the database
    - ratings() is a light projection (id, store_id, rating) for ranking
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storedir.core.domain_types import StoreId
from storedir.models.review import Review

logger = logging.getLogger(__name__)


def _to_dict(review: Review) -> dict:
    return {
        "id": review.id,
        "store_id": review.store_id,
        "author_id": review.author_id,
        "rating": review.rating,
        "text": review.text,
        "created_at": review.created_at,
    }


class SqlReviewRepository:
    """Review data source backed by the reviews table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def for_stores(self, store_ids: list[StoreId]) -> list[dict]:
        if not store_ids:
            return []
        result = await self.db.execute(
            select(Review)
            .where(Review.store_id.in_(store_ids))
            .order_by(Review.created_at.desc()),
        )
        return [_to_dict(r) for r in result.scalars().all()]

    async def ratings(self) -> list[dict]:
        result = await self.db.execute(
            select(Review.id, Review.store_id, Review.rating),
        )
        return [
            {"id": row.id, "store_id": row.store_id, "rating": row.rating}
            for row in result.all()
        ]

    async def add(self, review_data: dict) -> dict:
        review = Review(
            store_id=review_data["store_id"],
            author_id=review_data.get("author_id"),
            rating=review_data["rating"],
            text=review_data.get("text"),
        )
        self.db.add(review)
        await self.db.commit()
        logger.info(
            "Review stored",
            extra={"store_id": str(review.store_id)},
        )
        return _to_dict(review)
