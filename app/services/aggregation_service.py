"""
app/services/aggregation_service.py

Chart-ready projections over the in-memory brand collection.

Every function here is pure: inputs are read, never mutated, and each call
returns freshly built lists of plain dicts keyed by bucket, category or
brand name. These rows are the contract with the rendering layer.

Zero-fill rules
---------------
A brand that lacks a category, or a category entry that lacks a bucket,
contributes ``0`` to every projection. Rows are never omitted and values
are never ``None``.

Ordering rules
--------------
    price_distribution      -> PRICE_BUCKETS order
    category_mix            -> total descending, ties keep source order
    cross_brand_assortment  -> total_styles descending, ties keep source order
    pricing_curve           -> PRICE_BUCKETS order
    category_heatmap        -> CATEGORIES order
    category_drilldown      -> brand collection order
"""

from __future__ import annotations

from typing import Any, Final, Sequence

from app.domain.assortment import (
    CATEGORIES,
    HIGH_TIER_START_INDEX,
    PRICE_BUCKETS,
    CompetitorData,
    StyleCountData,
)

Row = dict[str, Any]

HIGH_TIER_BUCKETS: Final[tuple[str, ...]] = PRICE_BUCKETS[HIGH_TIER_START_INDEX:]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _bucket_total(record: CompetitorData, bucket: str) -> int:
    return sum(entry.count_for(bucket) for entry in record.data)


def _category_total(record: CompetitorData, category: str) -> int:
    entry = record.category(category)
    return entry.total if entry is not None else 0


def _bucket_row(entry: StyleCountData | None) -> Row:
    return {bucket: entry.count_for(bucket) if entry else 0 for bucket in PRICE_BUCKETS}


# ---------------------------------------------------------------------------
# Selected brand
# ---------------------------------------------------------------------------


def price_distribution(record: CompetitorData | None) -> list[Row]:
    """
    Sum each bucket across all of the brand's categories.

    Always returns one row per price bucket; a missing record yields zeros.
    """

    return [
        {"bucket": bucket, "count": _bucket_total(record, bucket) if record else 0}
        for bucket in PRICE_BUCKETS
    ]


def category_mix(record: CompetitorData | None) -> list[Row]:
    """
    Total styles per category, largest first.
    """

    if record is None:
        return []
    rows = [{"category": entry.category, "total": entry.total} for entry in record.data]
    # sorted() is stable, so equal totals keep their source order.
    return sorted(rows, key=lambda row: row["total"], reverse=True)


def assortment_deep_dive(record: CompetitorData | None) -> list[Row]:
    """
    One row per category the brand carries, with every bucket count.
    """

    if record is None:
        return []
    return [{"category": entry.category, **_bucket_row(entry)} for entry in record.data]


def catalog_matrix(record: CompetitorData | None) -> list[Row]:
    """
    Category by bucket matrix over every known category, zero-filled.
    """

    rows: list[Row] = []
    for category in CATEGORIES:
        entry = record.category(category) if record else None
        rows.append({"category": category, **_bucket_row(entry)})
    return rows


def brand_summary(record: CompetitorData | None) -> Row:
    """
    Headline figures for the overview stat cards.

    ``median_bucket`` is the bucket holding the median style when every
    style is laid out in bucket order. ``high_tier_share`` is the fraction
    of styles priced $400 and up.
    """

    distribution = price_distribution(record)
    counted = sum(row["count"] for row in distribution)
    mix = category_mix(record)

    median_bucket: str | None = None
    if counted:
        midpoint = (counted + 1) / 2
        running = 0
        for row in distribution:
            running += row["count"]
            if running >= midpoint:
                median_bucket = row["bucket"]
                break

    high_tier = sum(row["count"] for row in distribution if row["bucket"] in HIGH_TIER_BUCKETS)

    return {
        "total_styles": record.total_styles if record else 0,
        "dominant_category": mix[0]["category"] if mix and mix[0]["total"] > 0 else None,
        "median_bucket": median_bucket,
        "high_tier_share": high_tier / counted if counted else 0.0,
    }


# ---------------------------------------------------------------------------
# Cross-brand
# ---------------------------------------------------------------------------


def cross_brand_assortment(records: Sequence[CompetitorData]) -> list[Row]:
    """
    Brand volume league table, largest catalog first.
    """

    rows = [
        {"name": record.name, "total_styles": record.total_styles, "logo": record.logo}
        for record in records
    ]
    return sorted(rows, key=lambda row: row["total_styles"], reverse=True)


def pricing_curve(records: Sequence[CompetitorData]) -> list[Row]:
    """
    Per bucket, each brand's summed count across its categories.
    """

    rows: list[Row] = []
    for bucket in PRICE_BUCKETS:
        row: Row = {"bucket": bucket}
        for record in records:
            row[record.name] = _bucket_total(record, bucket)
        rows.append(row)
    return rows


def category_heatmap(records: Sequence[CompetitorData]) -> list[Row]:
    """
    Per category, each brand's total count for that category (0 when absent).
    """

    rows: list[Row] = []
    for category in CATEGORIES:
        row: Row = {"category": category}
        for record in records:
            row[record.name] = _category_total(record, category)
        rows.append(row)
    return rows


def category_drilldown(records: Sequence[CompetitorData], category: str) -> list[Row]:
    """
    Per brand, the bucket breakdown of one category.

    Brands that do not carry *category* get an all-zero row.
    """

    return [
        {"brand": record.name, **_bucket_row(record.category(category))}
        for record in records
    ]


def market_summary(records: Sequence[CompetitorData]) -> Row:
    """
    Volume leader and premium leader across the competitive set.

    The premium leader is the brand with the highest share of $400+ styles;
    ties keep collection order.
    """

    league = cross_brand_assortment(records)
    volume_leader = league[0] if league else None

    premium_leader: Row | None = None
    best_share = -1.0
    for record in records:
        share = brand_summary(record)["high_tier_share"]
        if share > best_share:
            best_share = share
            premium_leader = {"name": record.name, "high_tier_share": share, "logo": record.logo}

    return {"volume_leader": volume_leader, "premium_leader": premium_leader}
