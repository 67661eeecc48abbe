"""Review Schemas: rating bounds enforced at the API boundary."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    author_id: UUID | None = None
    rating: int = Field(ge=1, le=5)
    text: str | None = Field(None, max_length=2000)


class ReviewResponse(BaseModel):
    id: UUID
    store_id: UUID
    author_id: UUID | None = None
    rating: int
    text: str | None = None
    created_at: datetime | None = None
