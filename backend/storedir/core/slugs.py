"""Slug Derivation: pure normalization and count-based collision resolution.

Invariants:
    - Pure functions: no IO, no async, no DB
    - slugify() output contains only [a-z0-9-], no leading/trailing/double hyphens
    - An empty base slug is a validation failure, never persisted
    - Collision suffix is count-based: N matches of ^(base)(-[0-9]+)?$ -> base-(N+1)

Design Decisions:
    - Count-based suffixing kept as-is: gaps left by deleted stores are reused
      and two concurrent writers can compute the same suffix; the unique
      index on stores.slug rejects the second writer
    - Pattern re-applied in Python so repositories may prefilter loosely
"""

import re
import unicodedata

from storedir.core.errors import InputValidationError

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Normalize a display name into a lowercase hyphenated ASCII slug."""
    ascii_name = (
        unicodedata.normalize("NFKD", name)
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    return _NON_ALNUM.sub("-", ascii_name.lower()).strip("-")


def base_slug(name: str) -> str:
    """slugify() or raise InputValidationError when nothing URL-safe remains."""
    base = slugify(name or "")
    if not base:
        raise InputValidationError(
            "Store name must contain at least one letter or digit", "name",
        )
    return base


def collision_pattern(base: str) -> re.Pattern:
    """Match the base slug itself or the base followed by a numeric suffix."""
    return re.compile(rf"^({re.escape(base)})(-[0-9]+)?$", re.IGNORECASE)


def count_collisions(base: str, existing_slugs: list[str]) -> int:
    pattern = collision_pattern(base)
    return sum(1 for s in existing_slugs if s and pattern.match(s))


def resolve_slug(base: str, existing_slugs: list[str]) -> str:
    """Return base when unused, else base-(N+1) where N counts pattern matches."""
    matches = count_collisions(base, existing_slugs)
    if not matches:
        return base
    return f"{base}-{matches + 1}"


def name_changed(proposed_name: str | None, stored_name: str | None) -> bool:
    """True when the trimmed proposed name differs from the stored one.

    None means the caller did not touch the name.
    """
    if proposed_name is None:
        return False
    return proposed_name.strip() != (stored_name or "").strip()

