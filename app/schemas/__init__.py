"""
app/schemas package marker.
"""

from app.schemas.assortment import (
    BrandSummaryResponse,
    CompetitorResponse,
    CompetitorSummaryResponse,
    GroundingSourceResponse,
    HealthResponse,
    MarketSummaryResponse,
    ProjectionResponse,
    StyleCountResponse,
)

__all__ = [
    "BrandSummaryResponse",
    "CompetitorResponse",
    "CompetitorSummaryResponse",
    "GroundingSourceResponse",
    "HealthResponse",
    "MarketSummaryResponse",
    "ProjectionResponse",
    "StyleCountResponse",
]
