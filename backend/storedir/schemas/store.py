"""Store Schemas: Pydantic models with field-level validation for store endpoints.

Invariants:
    - StoreCreate.name: 1-200 chars after stripping, non-empty
    - LocationIn.coordinates: exactly [longitude, latitude]
    - StoreUpdate carries only the fields a client may change (no slug/author)
    - StoreResponse always has a reviews list
    - TopStoreResponse serializes its mean rating as "averageRating"
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storedir.schemas.review import ReviewResponse


class LocationIn(BaseModel):
    """GeoJSON-style point plus street address."""
    type: Literal["Point"] = "Point"
    coordinates: list[float] = Field(min_length=2, max_length=2)
    address: str = Field(min_length=1, max_length=500)

    @field_validator("address")
    @classmethod
    def strip_address(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("You must supply an address!")
        return v


class StoreCreate(BaseModel):
    """Store creation payload."""
    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    tags: list[str] = Field(default_factory=list, max_length=50)
    location: LocationIn
    photo: str | None = Field(None, max_length=500)
    author_id: UUID

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter a store name!")
        return v


class StoreUpdate(BaseModel):
    """Partial store update; unset fields are left alone."""
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    tags: list[str] | None = Field(None, max_length=50)
    location: LocationIn | None = None
    photo: str | None = Field(None, max_length=500)


class LocationOut(BaseModel):
    type: str = "Point"
    coordinates: list[float]
    address: str


class StoreResponse(BaseModel):
    """Store with its materialized reviews."""
    id: UUID
    name: str
    slug: str
    description: str | None = None
    tags: list[str] = []
    location: LocationOut
    photo: str | None = None
    author_id: UUID
    created_at: datetime
    reviews: list[ReviewResponse] = []
    distance_m: float | None = None


class StoreListResponse(BaseModel):
    stores: list[StoreResponse]
    total: int
    page: int
    pages: int


class TagCount(BaseModel):
    tag: str
    count: int


class TagsResponse(BaseModel):
    """Tag popularity report plus the stores matching the selected tag."""
    tags: list[TagCount]
    stores: list[StoreResponse]


class TopStoreResponse(BaseModel):
    """Summary row of the top-rated report."""
    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    name: str
    slug: str
    photo: str | None = None
    reviews: list[ReviewResponse]
    average_rating: float = Field(alias="averageRating")
