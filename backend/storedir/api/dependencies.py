"""Request Dependencies: builds a CatalogService per request from the DB session.

Invariants:
    - One AsyncSession per request, shared by all repositories of that request
    - No process-wide service instance
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storedir.infrastructure.database import get_db
from storedir.infrastructure.review_repository import SqlReviewRepository
from storedir.infrastructure.store_repository import SqlStoreRepository
from storedir.infrastructure.user_resolver import SqlUserResolver
from storedir.services.catalog_service import CatalogService


async def get_catalog(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(
        stores=SqlStoreRepository(db),
        reviews=SqlReviewRepository(db),
        users=SqlUserResolver(db),
    )
