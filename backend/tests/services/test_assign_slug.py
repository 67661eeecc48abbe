"""Slug assignment tests against an in-memory store repository fake.

Tests cover:
    - Fresh names get their base slug
    - Collisions counted through the repository lookup
    - Unchanged names keep the current slug without any lookup
    - Renames keep a slug that already fits the new base; others count every slug
    - Empty normalized names fail before the repository is touched
"""

import pytest

from storedir.core.errors import InputValidationError
from storedir.services.assign_slug import assign_slug


class _FakeStores:
    def __init__(self, slugs_by_id: dict | None = None):
        self.slugs_by_id = slugs_by_id or {}
        self.lookups = []

    async def find_slugs_like(self, base):
        self.lookups.append(base)
        return [
            slug for slug in self.slugs_by_id.values()
            if slug.lower().startswith(base)
        ]


async def test_unused_name_gets_base_slug():
    stores = _FakeStores()
    assert await assign_slug("Coffee Shop", stores) == "coffee-shop"
    assert stores.lookups == ["coffee-shop"]


async def test_collisions_get_count_based_suffix():
    stores = _FakeStores({1: "coffee-shop", 2: "coffee-shop-2", 3: "coffee-shops"})
    assert await assign_slug("Coffee Shop", stores) == "coffee-shop-3"


async def test_unchanged_name_keeps_slug_without_lookup():
    stores = _FakeStores({1: "coffee-shop", 2: "coffee-shop-2"})
    slug = await assign_slug(
        "Coffee Shop", stores,
        current_slug="coffee-shop-2", is_name_changing=False,
    )
    assert slug == "coffee-shop-2"
    assert stores.lookups == []


async def test_rename_within_same_base_keeps_slug_without_lookup():
    stores = _FakeStores({1: "coffee-shop", 2: "coffee-shop-2"})
    slug = await assign_slug(
        "Coffee Shop!", stores,
        current_slug="coffee-shop", is_name_changing=True,
    )
    assert slug == "coffee-shop"
    assert stores.lookups == []


async def test_suffixed_slug_survives_rename_to_same_base():
    stores = _FakeStores({1: "coffee-shop", 2: "coffee-shop-2"})
    slug = await assign_slug(
        "COFFEE shop", stores,
        current_slug="coffee-shop-2", is_name_changing=True,
    )
    assert slug == "coffee-shop-2"


async def test_rename_to_new_base_counts_every_stored_slug():
    stores = _FakeStores({1: "tea-house", 2: "coffee-shop"})
    slug = await assign_slug(
        "Tea House", stores,
        current_slug="coffee-shop", is_name_changing=True,
    )
    assert slug == "tea-house-2"
    assert stores.lookups == ["tea-house"]


async def test_missing_current_slug_always_derives():
    stores = _FakeStores()
    slug = await assign_slug("Tea House", stores, is_name_changing=False)
    assert slug == "tea-house"


async def test_empty_normalized_name_fails_before_lookup():
    stores = _FakeStores()
    with pytest.raises(InputValidationError) as exc:
        await assign_slug("???", stores)
    assert exc.value.field == "name"
    assert stores.lookups == []
