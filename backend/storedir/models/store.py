"""Store ORM: persists a business entity with its location and ordered tags.

Invariants:
    - id is UUID primary key
    - slug is UNIQUE: the storage-level guard against duplicate-slug races
    - longitude/latitude always both present (location.coordinates has two components)
    - tags live in store_tags ordered by position; duplicates allowed
    - created_at set once on insert, never updated
    - Reviews are not a relationship here: they are attached at read time

Design Decisions:
    - Relational store_tags instead of an array column: portable tag filtering
      across PostgreSQL and SQLite
    - (latitude, longitude) index backs the bounding-box prefilter for proximity search
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Float, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from storedir.db.base import Base


class Store(Base):
    """Store entity: a business listed in the directory."""
    __tablename__ = "stores"
    __table_args__ = (
        Index("ix_stores_lat_lng", "latitude", "longitude"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    photo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    author_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    tag_entries: Mapped[list["StoreTag"]] = relationship(
        "StoreTag", back_populates="store",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="StoreTag.position",
    )

    @property
    def tags(self) -> list[str]:
        return [entry.tag for entry in self.tag_entries]


class StoreTag(Base):
    """One tag occurrence on a store, kept in insertion order."""
    __tablename__ = "store_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    store_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    tag: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    store: Mapped["Store"] = relationship(
        "Store", back_populates="tag_entries",
    )
