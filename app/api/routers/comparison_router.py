"""
app/api/routers/comparison_router.py

Cross-brand comparison endpoints.

Every projection runs over the full brand collection; the sidebar search
filter never applies here.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.domain.assortment import CATEGORIES
from app.schemas.assortment import MarketSummaryResponse, ProjectionResponse
from app.services import aggregation_service
from app.services.dashboard_service import DashboardService, get_dashboard_service

router = APIRouter(prefix="/comparison", tags=["comparison"])


@router.get("/assortment", response_model=ProjectionResponse)
def get_cross_brand_assortment(
    service: DashboardService = Depends(get_dashboard_service),
) -> ProjectionResponse:
    return ProjectionResponse(rows=aggregation_service.cross_brand_assortment(service.state.competitors))


@router.get("/pricing-curve", response_model=ProjectionResponse)
def get_pricing_curve(
    service: DashboardService = Depends(get_dashboard_service),
) -> ProjectionResponse:
    return ProjectionResponse(rows=aggregation_service.pricing_curve(service.state.competitors))


@router.get("/heatmap", response_model=ProjectionResponse)
def get_category_heatmap(
    service: DashboardService = Depends(get_dashboard_service),
) -> ProjectionResponse:
    return ProjectionResponse(rows=aggregation_service.category_heatmap(service.state.competitors))


@router.get("/drilldown", response_model=ProjectionResponse)
def get_category_drilldown(
    category: str = Query(default=CATEGORIES[0], description="Category to break down by brand"),
    service: DashboardService = Depends(get_dashboard_service),
) -> ProjectionResponse:
    """
    Bucket breakdown of one category for every brand.
    """

    if category not in CATEGORIES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown category '{category}'. Allowed values: {list(CATEGORIES)}.",
        )
    return ProjectionResponse(
        rows=aggregation_service.category_drilldown(service.state.competitors, category)
    )


@router.get("/summary", response_model=MarketSummaryResponse)
def get_market_summary(
    service: DashboardService = Depends(get_dashboard_service),
) -> MarketSummaryResponse:
    return MarketSummaryResponse(**aggregation_service.market_summary(service.state.competitors))
