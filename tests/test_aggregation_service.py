"""
tests/test_aggregation_service.py

Pytest unit tests for the chart-ready projections.

Coverage
--------
- Price distribution: always eight rows, zero-filled, None record
- Category mix: descending and stable on ties
- Cross-brand league table ordering
- Pricing curve and heatmap zero-fill for every brand
- Category drilldown all-zero rows for absent categories
- Brand and market summaries
- Inputs are never mutated
"""

from __future__ import annotations

import copy

import pytest

from app.domain.assortment import CATEGORIES, PRICE_BUCKETS, CompetitorData, StyleCountData
from app.services import aggregation_service as agg


def _record(
    name: str,
    data: dict[str, dict[str, int]],
    total_styles: int | None = None,
) -> CompetitorData:
    entries = tuple(StyleCountData(category=category, counts=dict(counts)) for category, counts in data.items())
    return CompetitorData(
        id=f"id-{name}",
        name=name,
        url=f"https://{name.lower()}.example",
        logo=f"https://logo/{name}",
        last_updated="2026-01-01T00:00:00+00:00",
        total_styles=total_styles if total_styles is not None else sum(e.total for e in entries),
        data=entries,
    )


@pytest.fixture()
def brand_a() -> CompetitorData:
    return _record(
        "A",
        {
            "Polos": {"Under $100": 5},
            "Sweaters": {"$100 to $199": 3, "$400 to $599": 3},
        },
    )


@pytest.fixture()
def brand_b() -> CompetitorData:
    return _record("B", {"Sweaters": {"$1000+": 4}})


# ---------------------------------------------------------------------------
# Selected brand
# ---------------------------------------------------------------------------


class TestPriceDistribution:
    def test_always_eight_rows_in_bucket_order(self, brand_a: CompetitorData) -> None:
        rows = agg.price_distribution(brand_a)
        assert [row["bucket"] for row in rows] == list(PRICE_BUCKETS)
        assert rows[0]["count"] == 5
        assert rows[1]["count"] == 3
        assert rows[4]["count"] == 3
        assert rows[7]["count"] == 0

    def test_none_record_yields_zero_rows(self) -> None:
        rows = agg.price_distribution(None)
        assert len(rows) == 8
        assert all(row["count"] == 0 for row in rows)

    def test_empty_record_yields_zero_rows(self) -> None:
        rows = agg.price_distribution(_record("Empty", {}))
        assert len(rows) == 8
        assert sum(row["count"] for row in rows) == 0


class TestCategoryMix:
    def test_sorted_descending(self, brand_a: CompetitorData) -> None:
        rows = agg.category_mix(brand_a)
        assert rows == [
            {"category": "Sweaters", "total": 6},
            {"category": "Polos", "total": 5},
        ]

    def test_ties_keep_source_order(self) -> None:
        record = _record(
            "T",
            {
                "Shorts": {"Under $100": 2},
                "Polos": {"Under $100": 2},
                "Jeans & Denim": {"$100 to $199": 9},
            },
        )
        rows = agg.category_mix(record)
        assert [row["category"] for row in rows] == ["Jeans & Denim", "Shorts", "Polos"]

    def test_none_record(self) -> None:
        assert agg.category_mix(None) == []


class TestDeepDiveAndMatrix:
    def test_deep_dive_only_carried_categories(self, brand_a: CompetitorData) -> None:
        rows = agg.assortment_deep_dive(brand_a)
        assert [row["category"] for row in rows] == ["Polos", "Sweaters"]
        assert rows[0]["Under $100"] == 5
        assert rows[0]["$1000+"] == 0
        assert set(rows[1]) == {"category", *PRICE_BUCKETS}

    def test_catalog_matrix_covers_every_category(self, brand_a: CompetitorData) -> None:
        rows = agg.catalog_matrix(brand_a)
        assert [row["category"] for row in rows] == list(CATEGORIES)
        shorts = next(row for row in rows if row["category"] == "Shorts")
        assert all(shorts[bucket] == 0 for bucket in PRICE_BUCKETS)


class TestBrandSummary:
    def test_headline_figures(self) -> None:
        record = _record("S", {"Sweaters": {"Under $100": 2, "$400 to $599": 2}})
        summary = agg.brand_summary(record)
        assert summary == {
            "total_styles": 4,
            "dominant_category": "Sweaters",
            "median_bucket": "$400 to $599",
            "high_tier_share": 0.5,
        }

    def test_reported_total_is_used(self) -> None:
        record = _record("S", {"Polos": {"Under $100": 2}}, total_styles=120)
        assert agg.brand_summary(record)["total_styles"] == 120

    def test_empty_record(self) -> None:
        summary = agg.brand_summary(_record("E", {}))
        assert summary["dominant_category"] is None
        assert summary["median_bucket"] is None
        assert summary["high_tier_share"] == 0.0


# ---------------------------------------------------------------------------
# Cross-brand
# ---------------------------------------------------------------------------


class TestCrossBrand:
    def test_assortment_sorted_by_total(self, brand_a: CompetitorData, brand_b: CompetitorData) -> None:
        rows = agg.cross_brand_assortment([brand_b, brand_a])
        assert [row["name"] for row in rows] == ["A", "B"]
        assert rows[0] == {"name": "A", "total_styles": 11, "logo": "https://logo/A"}

    def test_assortment_ties_keep_collection_order(self) -> None:
        first = _record("First", {}, total_styles=10)
        second = _record("Second", {}, total_styles=10)
        rows = agg.cross_brand_assortment([first, second])
        assert [row["name"] for row in rows] == ["First", "Second"]

    def test_pricing_curve_has_every_brand_in_every_row(
        self, brand_a: CompetitorData, brand_b: CompetitorData
    ) -> None:
        rows = agg.pricing_curve([brand_a, brand_b])
        assert [row["bucket"] for row in rows] == list(PRICE_BUCKETS)
        for row in rows:
            assert set(row) == {"bucket", "A", "B"}
        assert rows[0] == {"bucket": "Under $100", "A": 5, "B": 0}
        assert rows[7] == {"bucket": "$1000+", "A": 0, "B": 4}

    def test_heatmap_polos_scenario(self, brand_a: CompetitorData, brand_b: CompetitorData) -> None:
        rows = agg.category_heatmap([brand_a, brand_b])
        assert [row["category"] for row in rows] == list(CATEGORIES)
        polos = next(row for row in rows if row["category"] == "Polos")
        assert polos == {"category": "Polos", "A": 5, "B": 0}

    def test_heatmap_with_no_brands(self) -> None:
        rows = agg.category_heatmap([])
        assert rows == [{"category": category} for category in CATEGORIES]

    def test_drilldown_absent_category_is_all_zero(
        self, brand_a: CompetitorData, brand_b: CompetitorData
    ) -> None:
        rows = agg.category_drilldown([brand_a, brand_b], "Polos")
        assert [row["brand"] for row in rows] == ["A", "B"]
        assert rows[0]["Under $100"] == 5
        assert all(rows[1][bucket] == 0 for bucket in PRICE_BUCKETS)

    def test_market_summary(self, brand_a: CompetitorData, brand_b: CompetitorData) -> None:
        summary = agg.market_summary([brand_a, brand_b])
        assert summary["volume_leader"]["name"] == "A"
        assert summary["premium_leader"]["name"] == "B"
        assert summary["premium_leader"]["high_tier_share"] == 1.0

    def test_market_summary_empty(self) -> None:
        assert agg.market_summary([]) == {"volume_leader": None, "premium_leader": None}


def test_projections_do_not_mutate_inputs(brand_a: CompetitorData, brand_b: CompetitorData) -> None:
    records = [brand_a, brand_b]
    snapshot = copy.deepcopy(records)

    agg.price_distribution(brand_a)
    agg.category_mix(brand_a)
    agg.pricing_curve(records)
    agg.category_heatmap(records)
    agg.category_drilldown(records, "Sweaters")
    agg.market_summary(records)

    assert records == snapshot
