"""
app/services/mock_data_service.py

Offline assortment synthesizer.

Produces plausible per-brand style counts without any network access.
Each category carries two sets of "hot" price-bucket indices: one for
standard brands and one for premium brands. Counts are drawn so that hot
buckets dominate, neighbouring buckets get some bleed-over, and everything
else stays at or near zero.

Counting rules per bucket index
-------------------------------
    in target set          -> uniform integer in [10, 50)
    adjacent (+/-1) to one -> uniform integer in [0, 10)
    otherwise              -> 0 with 95% probability, else uniform in [0, 2)
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Final, Iterable

from app.brands.loader import SeedCompetitor, build_logo_url
from app.domain.assortment import (
    CATEGORIES,
    PRICE_BUCKETS,
    CompetitorData,
    StyleCountData,
    is_premium_brand,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceProfile:
    """
    Hot bucket indices for standard and premium brands in one category.
    """

    typical: tuple[int, ...]
    premium: tuple[int, ...]

    def targets(self, premium: bool) -> tuple[int, ...]:
        return self.premium if premium else self.typical


DEFAULT_PROFILE: Final[PriceProfile] = PriceProfile(typical=(0, 1, 2), premium=(2, 3, 4))

CATEGORY_PRICE_PROFILES: Final[dict[str, PriceProfile]] = {
    "Tees, Henleys & Tanks": PriceProfile(typical=(0,), premium=(0, 1)),
    "Casual Shirts": PriceProfile(typical=(0, 1), premium=(1, 2)),
    "Dress Shirts": PriceProfile(typical=(0, 1), premium=(1, 2)),
    "Polos": PriceProfile(typical=(0, 1), premium=(1, 2)),
    "Sweater Polos": PriceProfile(typical=(1, 2), premium=(2, 3)),
    "Sweaters": PriceProfile(typical=(1, 2, 3), premium=(3, 4, 5)),
    "Cardigans & Zip-Ups": PriceProfile(typical=(1, 2, 3), premium=(3, 4, 5)),
    "Sweatshirts": PriceProfile(typical=(0, 1), premium=(1, 2)),
    "Shirt Jackets & Overshirts": PriceProfile(typical=(1, 2, 3), premium=(3, 4, 5)),
    "Coats & Outerwear": PriceProfile(typical=(4, 5, 6), premium=(6, 7)),
    "Suit Jackets & Sport Coats": PriceProfile(typical=(3, 4, 5), premium=(5, 6, 7)),
    "Jeans & Denim": PriceProfile(typical=(1, 2), premium=(2, 3)),
    "Casual Pants (chinos and khakis)": PriceProfile(typical=(1, 2), premium=(1, 2)),
    "Dress Pants": PriceProfile(typical=(1, 2, 3), premium=(2, 3, 4)),
    "Sweatpants": PriceProfile(typical=(0, 1), premium=(1, 2)),
    "Shorts": PriceProfile(typical=(0, 1), premium=(0, 1)),
}

TARGET_RANGE: Final[tuple[int, int]] = (10, 50)
ADJACENT_RANGE: Final[tuple[int, int]] = (0, 10)
OUTLIER_RANGE: Final[tuple[int, int]] = (0, 2)
OUTLIER_ZERO_PROBABILITY: Final[float] = 0.95


def profile_for(category: str) -> PriceProfile:
    """
    Return the price profile for *category*, or the default profile.
    """

    return CATEGORY_PRICE_PROFILES.get(category, DEFAULT_PROFILE)


def draw_bucket_count(index: int, targets: Iterable[int], rng: random.Random) -> int:
    """
    Draw one bucket count according to its distance from the target set.
    """

    target_set = set(targets)
    if index in target_set:
        return rng.randrange(*TARGET_RANGE)
    if any(abs(target - index) == 1 for target in target_set):
        return rng.randrange(*ADJACENT_RANGE)
    if rng.random() > OUTLIER_ZERO_PROBABILITY:
        return rng.randrange(*OUTLIER_RANGE)
    return 0


def synthesize_category(category: str, *, premium: bool, rng: random.Random) -> StyleCountData:
    targets = profile_for(category).targets(premium)
    counts = {
        bucket: draw_bucket_count(index, targets, rng)
        for index, bucket in enumerate(PRICE_BUCKETS)
    }
    return StyleCountData(category=category, counts=counts)


def new_record_id() -> str:
    return uuid.uuid4().hex


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_mock_data(
    name: str,
    url: str,
    *,
    rng: random.Random | None = None,
    premium: bool | None = None,
    logo: str | None = None,
    categories: Iterable[str] = CATEGORIES,
) -> CompetitorData:
    """
    Build a complete CompetitorData record from the profile table.

    ``premium`` overrides the brand classification; when omitted the brand
    name is checked against the premium brand list. ``categories`` is exposed
    so unlisted labels can be synthesized with the default profile.
    """

    rng = rng or random.Random()
    is_premium = is_premium_brand(name) if premium is None else premium

    data = tuple(
        synthesize_category(category, premium=is_premium, rng=rng)
        for category in categories
    )
    total_styles = sum(entry.total for entry in data)

    logger.debug(
        "Synthesized mock assortment for %s (premium=%s, total_styles=%d)",
        name,
        is_premium,
        total_styles,
    )

    return CompetitorData(
        id=new_record_id(),
        name=name,
        url=url,
        logo=logo or build_logo_url(name),
        last_updated=utc_timestamp(),
        total_styles=total_styles,
        data=data,
    )


def seed_competitors(
    seeds: Iterable[SeedCompetitor],
    *,
    rng: random.Random | None = None,
) -> list[CompetitorData]:
    """
    Build the initial brand collection, one mock record per seed brand.
    """

    rng = rng or random.Random()
    return [
        generate_mock_data(
            seed.name,
            seed.url,
            rng=rng,
            premium=seed.premium,
            logo=seed.logo,
        )
        for seed in seeds
    ]
