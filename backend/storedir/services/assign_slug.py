"""Slug Assignment: resolves a unique slug for a store name against the store repository.

Invariants:
    - Runs only when a name is created or changing (is_name_changing passed explicitly)
    - Unchanged names keep current_slug: re-saving never appends a suffix
    - A rename whose current_slug already fits the new base keeps current_slug
    - Otherwise every stored slug is counted; the record's own slug cannot
      match the new base in that case
    - Empty normalized names raise InputValidationError before any read or write
    - The lookup-then-write sequence is not isolated; a concurrent writer can
      pick the same slug and the storage unique index rejects one of them
"""

import logging

from storedir.core.repository_protocols import StoreRepository
from storedir.core.slugs import base_slug, collision_pattern, resolve_slug

logger = logging.getLogger(__name__)


async def assign_slug(
    candidate_name: str,
    stores: StoreRepository,
    *,
    current_slug: str | None = None,
    is_name_changing: bool = True,
) -> str:
    """Return the slug to persist with the record being written."""
    if current_slug and not is_name_changing:
        return current_slug

    base = base_slug(candidate_name)
    if current_slug and collision_pattern(base).match(current_slug):
        return current_slug

    existing = await stores.find_slugs_like(base)
    slug = resolve_slug(base, existing)
    if slug != base:
        logger.info(
            f"Slug '{base}' taken {len(existing)} time(s), assigned '{slug}'",
            extra={"slug": slug},
        )
    return slug
