"""Relation Attachment: joins reviews onto stores as a computed, non-persisted view.

Invariants:
    - Pure function: no IO, no async, no DB
    - Every returned store carries a "reviews" list, empty when nothing references it
    - Reviews are matched strictly on review["store_id"] == store["id"]
    - Input store dicts are never mutated; copies are returned in input order
"""

from collections import defaultdict


def group_by_store(reviews: list[dict]) -> dict:
    grouped = defaultdict(list)
    for review in reviews:
        grouped[review["store_id"]].append(review)
    return grouped


def attach_reviews(stores: list[dict], reviews: list[dict]) -> list[dict]:
    """Return copies of stores with their referencing reviews under "reviews"."""
    grouped = group_by_store(reviews)
    return [
        {**store, "reviews": list(grouped.get(store["id"], []))}
        for store in stores
    ]
