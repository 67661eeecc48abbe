"""SQL Store Repository: StoreRepository Protocol over SQLAlchemy async sessions.

Invariants:
    - Returns plain dicts (see _to_dict); never returns ORM instances
    - Never attaches reviews: the review materializer does that on top
    - A unique violation on stores.slug surfaces as DuplicateSlugError, not retried
    - Every other integrity violation surfaces as DatabaseError
    - Tags written with explicit position, read back in position order

Design Decisions:
    - Collision lookup prefilters with lower(slug) LIKE 'base%'; the exact
      ^(base)(-[0-9]+)?$ match happens in core/slugs.py
    - Proximity search: bounding box in SQL (two longitude ranges when it
      crosses the antimeridian), haversine ordering in Python
    - Text search: case-insensitive substring over name and description
"""

import logging
from collections import defaultdict

from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storedir.core.domain_types import StoreFilter, StoreId
from storedir.core.errors import (
    DatabaseError, DuplicateSlugError, ResourceNotFoundError,
)
from storedir.core.geo import bounding_box, crosses_antimeridian, haversine
from storedir.models.store import Store, StoreTag

logger = logging.getLogger(__name__)


def _to_dict(store: Store) -> dict:
    return {
        "id": store.id,
        "name": store.name,
        "slug": store.slug,
        "description": store.description,
        "tags": store.tags,
        "location": {
            "type": "Point",
            "coordinates": [store.longitude, store.latitude],
            "address": store.address,
        },
        "photo": store.photo,
        "author_id": store.author_id,
        "created_at": store.created_at,
    }


def _tag_entries(tags: list[str]) -> list[StoreTag]:
    return [StoreTag(position=i, tag=tag) for i, tag in enumerate(tags)]


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlStoreRepository:
    """Store persistence backed by the stores and store_tags tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, store_data: dict) -> dict:
        location = store_data["location"]
        store = Store(
            name=store_data["name"],
            slug=store_data["slug"],
            description=store_data.get("description"),
            longitude=location["coordinates"][0],
            latitude=location["coordinates"][1],
            address=location["address"],
            photo=store_data.get("photo"),
            author_id=store_data["author_id"],
        )
        store.tag_entries = _tag_entries(store_data.get("tags", []))
        self.db.add(store)
        await self._commit(store.slug)
        return _to_dict(store)

    async def update(self, store_id: StoreId, changes: dict) -> dict:
        store = await self._get_model(store_id)
        if store is None:
            raise ResourceNotFoundError("Store", str(store_id))
        for key in ("name", "slug", "description", "photo"):
            if key in changes:
                setattr(store, key, changes[key])
        if "location" in changes:
            store.longitude, store.latitude = changes["location"]["coordinates"]
            store.address = changes["location"]["address"]
        if "tags" in changes:
            store.tag_entries = _tag_entries(changes["tags"])
        await self._commit(store.slug)
        return _to_dict(store)

    async def get_by_slug(self, slug: str) -> dict | None:
        result = await self.db.execute(select(Store).where(Store.slug == slug))
        store = result.scalar_one_or_none()
        return _to_dict(store) if store else None

    async def get_by_id(self, store_id: StoreId) -> dict | None:
        store = await self._get_model(store_id)
        return _to_dict(store) if store else None

    async def find(self, store_filter: StoreFilter) -> tuple[list[dict], int]:
        conditions = []
        if store_filter.tag:
            conditions.append(Store.id.in_(
                select(StoreTag.store_id).where(StoreTag.tag == store_filter.tag),
            ))
        if store_filter.author_id:
            conditions.append(Store.author_id == store_filter.author_id)

        total = await self.db.scalar(
            select(func.count()).select_from(Store).where(*conditions),
        )
        query = (
            select(Store)
            .where(*conditions)
            .order_by(Store.created_at.desc(), Store.name)
            .offset(store_filter.offset)
            .limit(store_filter.page_size)
        )
        result = await self.db.execute(query)
        return [_to_dict(s) for s in result.scalars().all()], total or 0

    async def with_tag(self, tag: str | None) -> list[dict]:
        """Stores carrying tag, or every store with at least one tag when tag is None."""
        tagged = select(StoreTag.store_id)
        if tag is not None:
            tagged = tagged.where(StoreTag.tag == tag)
        result = await self.db.execute(
            select(Store).where(Store.id.in_(tagged)).order_by(Store.name),
        )
        return [_to_dict(s) for s in result.scalars().all()]

    async def find_slugs_like(self, base: str) -> list[str]:
        query = select(Store.slug).where(
            func.lower(Store.slug).like(f"{_escape_like(base)}%", escape="\\"),
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def search(self, query: str, limit: int) -> list[dict]:
        terms = query.split()
        if not terms:
            return []
        conditions = []
        for term in terms:
            pattern = f"%{_escape_like(term)}%"
            conditions.append(Store.name.ilike(pattern, escape="\\"))
            conditions.append(Store.description.ilike(pattern, escape="\\"))
        result = await self.db.execute(
            select(Store).where(or_(*conditions)).order_by(Store.name).limit(limit),
        )
        return [_to_dict(s) for s in result.scalars().all()]

    async def find_near(
        self, lng: float, lat: float, max_distance_m: float, limit: int,
    ) -> list[dict]:
        min_lng, min_lat, max_lng, max_lat = bounding_box(lng, lat, max_distance_m)
        if crosses_antimeridian(min_lng, max_lng):
            in_lng_range = or_(
                Store.longitude.between(min_lng, 180.0),
                Store.longitude.between(-180.0, max_lng),
            )
        else:
            in_lng_range = Store.longitude.between(min_lng, max_lng)
        result = await self.db.execute(
            select(Store).where(
                in_lng_range,
                Store.latitude.between(min_lat, max_lat),
            ),
        )
        nearby = []
        for store in result.scalars().all():
            distance = haversine(lat, lng, store.latitude, store.longitude)
            if distance <= max_distance_m:
                nearby.append({**_to_dict(store), "distance_m": distance})
        nearby.sort(key=lambda s: s["distance_m"])
        return nearby[:limit]

    async def tag_lists(self) -> list[list[str]]:
        result = await self.db.execute(
            select(StoreTag.store_id, StoreTag.tag)
            .order_by(StoreTag.store_id, StoreTag.position),
        )
        grouped = defaultdict(list)
        for store_id, tag in result.all():
            grouped[store_id].append(tag)
        return list(grouped.values())

    async def summaries(self) -> list[dict]:
        result = await self.db.execute(
            select(Store.id, Store.name, Store.slug, Store.photo),
        )
        return [
            {"id": row.id, "name": row.name, "slug": row.slug, "photo": row.photo}
            for row in result.all()
        ]

    async def _get_model(self, store_id: StoreId) -> Store | None:
        result = await self.db.execute(select(Store).where(Store.id == store_id))
        return result.scalar_one_or_none()

    async def _commit(self, slug: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if "slug" in str(e.orig).lower():
                logger.warning(
                    f"Duplicate slug rejected by storage: {slug}",
                    extra={"slug": slug},
                )
                raise DuplicateSlugError(slug) from e
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit") from e
