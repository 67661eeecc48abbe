"""Store schemas: request validation at the API boundary and response aliases.

Invariants:
    - StoreCreate strips the name and rejects whitespace-only names
    - LocationIn.coordinates holds exactly two numbers
    - StoreUpdate forbids slug, author_id and unknown fields
    - TopStoreResponse serializes its mean rating as "averageRating"
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from storedir.schemas.review import ReviewCreate
from storedir.schemas.store import StoreCreate, StoreUpdate, TopStoreResponse


def _location(**overrides):
    return {
        "coordinates": [-79.38, 43.65],
        "address": "1 Front St",
        **overrides,
    }


def test_store_create_strips_name():
    store = StoreCreate(name="  Coffee Shop ", location=_location(), author_id=uuid4())
    assert store.name == "Coffee Shop"
    assert store.tags == []
    assert store.location.type == "Point"


def test_store_create_rejects_blank_name():
    with pytest.raises(ValidationError):
        StoreCreate(name="   ", location=_location(), author_id=uuid4())


def test_location_requires_two_coordinates():
    with pytest.raises(ValidationError):
        StoreCreate(
            name="Coffee", location=_location(coordinates=[1.0]), author_id=uuid4(),
        )


def test_location_rejects_blank_address():
    with pytest.raises(ValidationError):
        StoreCreate(name="Coffee", location=_location(address=" "), author_id=uuid4())


def test_store_update_forbids_slug_and_author():
    with pytest.raises(ValidationError):
        StoreUpdate(slug="mine")
    with pytest.raises(ValidationError):
        StoreUpdate(author_id=str(uuid4()))


def test_store_update_tracks_only_set_fields():
    update = StoreUpdate(description="Open late")
    assert update.model_dump(exclude_unset=True) == {"description": "Open late"}


def test_review_create_rating_bounds():
    assert ReviewCreate(rating=5).rating == 5
    with pytest.raises(ValidationError):
        ReviewCreate(rating=6)
    with pytest.raises(ValidationError):
        ReviewCreate(rating=0)


def test_top_store_response_uses_average_rating_alias():
    row = TopStoreResponse.model_validate({
        "id": uuid4(), "name": "A", "slug": "a", "photo": None,
        "reviews": [], "averageRating": 4.5,
    })
    assert row.average_rating == 4.5
    dumped = row.model_dump(by_alias=True)
    assert dumped["averageRating"] == 4.5
    assert "average_rating" not in dumped
