"""
app/domain/assortment.py

Domain vocabulary and record shapes for competitor assortment tracking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

PRICE_BUCKETS: Final[tuple[str, ...]] = (
    "Under $100",
    "$100 to $199",
    "$200 to $299",
    "$300 to $399",
    "$400 to $599",
    "$600 to $799",
    "$799 to $999",
    "$1000+",
)
"""Full-price buckets in display order."""

CATEGORIES: Final[tuple[str, ...]] = (
    "Tees, Henleys & Tanks",
    "Casual Shirts",
    "Dress Shirts",
    "Polos",
    "Sweater Polos",
    "Sweaters",
    "Cardigans & Zip-Ups",
    "Sweatshirts",
    "Shirt Jackets & Overshirts",
    "Coats & Outerwear",
    "Suit Jackets & Sport Coats",
    "Jeans & Denim",
    "Casual Pants (chinos and khakis)",
    "Dress Pants",
    "Sweatpants",
    "Shorts",
)
"""Tracked product categories in display order."""

PREMIUM_BRANDS: Final[frozenset[str]] = frozenset(
    {"Ralph Lauren", "Todd Snyder", "Sid Mashburn", "Suit Supply"}
)

HIGH_TIER_START_INDEX: Final[int] = 4
"""Buckets at or above this index ($400+) count as high tier."""

_CATEGORY_ORDER = {category: index for index, category in enumerate(CATEGORIES)}


def is_premium_brand(name: str) -> bool:
    return name in PREMIUM_BRANDS


def category_sort_key(category: str) -> int:
    """
    Position of *category* in the enumeration; unknown labels sort last.
    """

    return _CATEGORY_ORDER.get(category, len(CATEGORIES))


def empty_counts() -> dict[str, int]:
    return {bucket: 0 for bucket in PRICE_BUCKETS}


@dataclass(frozen=True)
class GroundingSource:
    """
    One citation returned alongside a remote analysis.
    """

    title: str
    uri: str


@dataclass(frozen=True)
class StyleCountData:
    """
    Full-price style counts for one category, keyed by price bucket.
    """

    category: str
    counts: dict[str, int]

    @property
    def total(self) -> int:
        return sum(self.counts.get(bucket, 0) for bucket in PRICE_BUCKETS)

    def count_for(self, bucket: str) -> int:
        return self.counts.get(bucket, 0)


@dataclass(frozen=True)
class CompetitorData:
    """
    Assortment snapshot for one tracked brand.

    Records are never mutated; a refresh swaps in a new instance carrying
    the same ``id``.
    """

    id: str
    name: str
    url: str
    logo: str
    last_updated: str
    total_styles: int
    data: tuple[StyleCountData, ...] = ()
    sources: tuple[GroundingSource, ...] = field(default_factory=tuple)

    def category(self, category: str) -> StyleCountData | None:
        for entry in self.data:
            if entry.category == category:
                return entry
        return None

    @property
    def counted_styles(self) -> int:
        """Sum of every bucket count across all categories."""
        return sum(entry.total for entry in self.data)
