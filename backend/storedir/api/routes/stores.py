"""Store Routes: create, read, search, proximity, tags and top-rated endpoints.

Invariants:
    - Fixed paths (/search, /near, /top, /tags) registered before /{slug}
    - Absent stores map to a 404 ResourceNotFoundError envelope
    - Every store payload includes its reviews (materialized by the service)
    - Defaults for page size, limits and radius come from Settings
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from storedir.api.dependencies import get_catalog
from storedir.config import get_settings
from storedir.core.domain_types import StoreFilter
from storedir.core.errors import ResourceNotFoundError
from storedir.schemas.review import ReviewCreate, ReviewResponse
from storedir.schemas.store import (
    StoreCreate, StoreListResponse, StoreResponse, StoreUpdate,
    TagsResponse, TopStoreResponse,
)
from storedir.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/stores", tags=["stores"])


@router.post(
    "", response_model=StoreResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_store(
    body: StoreCreate, catalog: CatalogService = Depends(get_catalog),
):
    """Create a store; the slug is derived from its name."""
    return await catalog.create_store(body.model_dump())


@router.get("", response_model=StoreListResponse)
async def list_stores(
    page: int = Query(1, ge=1),
    tag: str | None = Query(None, max_length=100),
    author_id: UUID | None = None,
    catalog: CatalogService = Depends(get_catalog),
):
    """List stores newest first, optionally filtered by tag or author."""
    store_filter = StoreFilter(
        tag=tag, author_id=author_id, page=page,
        page_size=get_settings().stores_page_size,
    )
    return await catalog.list_stores(store_filter)


@router.get("/search", response_model=list[StoreResponse])
async def search_stores(
    q: str = Query(..., min_length=1, max_length=200),
    catalog: CatalogService = Depends(get_catalog),
):
    """Text search over store name and description."""
    return await catalog.search_stores(q, get_settings().search_limit)


@router.get("/near", response_model=list[StoreResponse])
async def nearby_stores(
    lng: float = Query(..., ge=-180, le=180),
    lat: float = Query(..., ge=-90, le=90),
    max_distance: float | None = Query(None, gt=0),
    catalog: CatalogService = Depends(get_catalog),
):
    """Nearest stores within max_distance meters, closest first."""
    settings = get_settings()
    return await catalog.nearby_stores(
        lng, lat,
        max_distance_m=max_distance or settings.nearby_max_distance_m,
        limit=settings.nearby_limit,
    )


@router.get("/top", response_model=list[TopStoreResponse])
async def top_stores(
    limit: int | None = Query(None, ge=1, le=100),
    catalog: CatalogService = Depends(get_catalog),
):
    """Stores with more than one review, ranked by average rating."""
    return await catalog.top_stores(limit or get_settings().top_stores_limit)


@router.get("/tags", response_model=TagsResponse)
async def tags(
    tag: str | None = Query(None, max_length=100),
    catalog: CatalogService = Depends(get_catalog),
):
    """Tag popularity plus the stores carrying the selected tag."""
    return await catalog.stores_by_tag(tag)


@router.get("/{slug}", response_model=StoreResponse)
async def get_store(
    slug: str, catalog: CatalogService = Depends(get_catalog),
):
    """Get one store by slug."""
    store = await catalog.get_store(slug)
    if store is None:
        raise ResourceNotFoundError("Store", slug)
    return store


@router.patch("/id/{store_id}", response_model=StoreResponse)
async def update_store(
    store_id: UUID,
    body: StoreUpdate,
    catalog: CatalogService = Depends(get_catalog),
):
    """Partially update a store; a changed name re-derives the slug."""
    return await catalog.update_store(store_id, body.model_dump(exclude_unset=True))


@router.post(
    "/id/{store_id}/reviews", response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_review(
    store_id: UUID,
    body: ReviewCreate,
    catalog: CatalogService = Depends(get_catalog),
):
    """Attach a review to a store."""
    return await catalog.add_review(
        store_id, body.rating, text=body.text, author_id=body.author_id,
    )
