"""
app/domain package marker.
"""

from app.domain.assortment import (
    CATEGORIES,
    PRICE_BUCKETS,
    CompetitorData,
    GroundingSource,
    StyleCountData,
)
from app.domain.dashboard import DashboardState, ViewMode, reduce

__all__ = [
    "CATEGORIES",
    "CompetitorData",
    "DashboardState",
    "GroundingSource",
    "PRICE_BUCKETS",
    "StyleCountData",
    "ViewMode",
    "reduce",
]
