"""Aggregation Pipelines: tag popularity and review-weighted store ranking.

Invariants:
    - Pure functions: no IO, no async, no DB; recomputed on every call
    - tag_counts: one occurrence per (store, tag) entry, duplicates inside a
      store's tags counted independently; sorted count desc, tag asc
    - top_stores: only stores with strictly more than one review; averageRating
      is the arithmetic mean of joined ratings; sorted averageRating desc,
      name asc; truncated to limit
    - Summaries carry photo, name, slug, reviews, averageRating (plus id)

Design Decisions:
    - Each stage is a small function over lists of dicts; the two reports
      are explicit compositions of those stages
    - Stores without an "id" match nothing in the lookup stage
"""

from collections import Counter
from typing import Iterable

from storedir.core.domain_types import DEFAULT_TOP_STORES_LIMIT
from storedir.core.errors import InputValidationError
from storedir.core.relations import attach_reviews

_MIN_REVIEWS_FOR_RANKING = 2


# ─── Stages ──────────────────────────────────────────────────────

def unwind(tag_lists: Iterable[list[str]]) -> list[str]:
    """Flatten per-store tag sequences into individual occurrences."""
    return [tag for tags in tag_lists for tag in (tags or [])]


def group_count(values: list[str]) -> list[dict]:
    return [{"tag": value, "count": n} for value, n in Counter(values).items()]


def sort_by_count(groups: list[dict]) -> list[dict]:
    return sorted(groups, key=lambda g: (-g["count"], g["tag"]))


def lookup_reviews(stores: list[dict], reviews: list[dict]) -> list[dict]:
    return attach_reviews(stores, reviews)


def match_min_reviews(
    stores: list[dict], minimum: int = _MIN_REVIEWS_FOR_RANKING,
) -> list[dict]:
    return [s for s in stores if len(s["reviews"]) >= minimum]


def average_rating(reviews: list[dict]) -> float | None:
    if not reviews:
        return None
    return sum(r["rating"] for r in reviews) / len(reviews)


def project_summary(store: dict) -> dict:
    return {
        "id": store.get("id"),
        "photo": store.get("photo"),
        "name": store.get("name"),
        "slug": store.get("slug"),
        "reviews": store["reviews"],
        "averageRating": average_rating(store["reviews"]),
    }


def sort_by_rating(summaries: list[dict]) -> list[dict]:
    return sorted(
        summaries, key=lambda s: (-s["averageRating"], s["name"] or ""),
    )


def limit_to(items: list[dict], limit: int) -> list[dict]:
    return items[:limit]


# ─── Reports ─────────────────────────────────────────────────────

def tag_counts(tag_lists: Iterable[list[str]]) -> list[dict]:
    """Tag popularity report: [{"tag": str, "count": int}, ...]."""
    return sort_by_count(group_count(unwind(tag_lists)))


def top_stores(
    stores: list[dict],
    reviews: list[dict],
    limit: int = DEFAULT_TOP_STORES_LIMIT,
) -> list[dict]:
    """Top-rated report over stores joined with their reviews."""
    check_limit(limit)
    joined = lookup_reviews(stores, reviews)
    eligible = match_min_reviews(joined)
    ranked = sort_by_rating([project_summary(s) for s in eligible])
    return limit_to(ranked, limit)


def check_limit(limit: int) -> None:
    if limit < 0:
        raise InputValidationError("limit must not be negative", "limit")
