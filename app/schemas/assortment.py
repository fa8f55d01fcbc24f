"""
app/schemas/assortment.py

Response schemas for brand and comparison endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from app.domain.assortment import CompetitorData


class GroundingSourceResponse(BaseModel):
    """
    API response model for one citation.
    """

    title: str
    uri: str


class StyleCountResponse(BaseModel):
    """
    API response model for one category's bucket counts.
    """

    category: str
    counts: dict[str, int]


class CompetitorSummaryResponse(BaseModel):
    """
    Sidebar entry for one tracked brand.
    """

    id: str
    name: str
    url: str
    logo: str
    total_styles: int = Field(..., ge=0)
    last_updated: str
    analyzing: bool = False
    refresh_error: str | None = None


class CompetitorResponse(CompetitorSummaryResponse):
    """
    Full brand record.
    """

    data: list[StyleCountResponse] = Field(default_factory=list)
    sources: list[GroundingSourceResponse] = Field(default_factory=list)


class BrandSummaryResponse(BaseModel):
    """
    Headline figures for one brand.
    """

    total_styles: int = Field(..., ge=0)
    dominant_category: str | None = None
    median_bucket: str | None = None
    high_tier_share: float = Field(..., ge=0.0, le=1.0)


class ProjectionResponse(BaseModel):
    """
    Chart-ready rows for one projection.
    """

    rows: list[dict[str, Any]] = Field(default_factory=list)


class MarketSummaryResponse(BaseModel):
    """
    Volume and premium leaders across the competitive set.
    """

    volume_leader: dict[str, Any] | None = None
    premium_leader: dict[str, Any] | None = None


def to_summary_response(
    record: CompetitorData,
    *,
    analyzing: bool = False,
    refresh_error: str | None = None,
) -> CompetitorSummaryResponse:
    return CompetitorSummaryResponse(
        id=record.id,
        name=record.name,
        url=record.url,
        logo=record.logo,
        total_styles=record.total_styles,
        last_updated=record.last_updated,
        analyzing=analyzing,
        refresh_error=refresh_error,
    )


def to_competitor_response(
    record: CompetitorData,
    *,
    analyzing: bool = False,
    refresh_error: str | None = None,
) -> CompetitorResponse:
    return CompetitorResponse(
        id=record.id,
        name=record.name,
        url=record.url,
        logo=record.logo,
        total_styles=record.total_styles,
        last_updated=record.last_updated,
        analyzing=analyzing,
        refresh_error=refresh_error,
        data=[
            StyleCountResponse(category=entry.category, counts=dict(entry.counts))
            for entry in record.data
        ],
        sources=[
            GroundingSourceResponse(title=source.title, uri=source.uri)
            for source in record.sources
        ],
    )


class HealthResponse(BaseModel):
    """
    Liveness payload.
    """

    status: str
    competitors: int = Field(..., ge=0)
    analyzer: str
