"""
app/api/routers/competitor_router.py

Per-brand endpoints: listing, detail, refresh and single-brand projections.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.domain.assortment import CompetitorData
from app.domain.dashboard import filter_competitors, is_analyzing
from app.schemas.assortment import (
    BrandSummaryResponse,
    CompetitorResponse,
    CompetitorSummaryResponse,
    ProjectionResponse,
    to_competitor_response,
    to_summary_response,
)
from app.services import aggregation_service
from app.services.analyzer_service import AnalysisError
from app.services.dashboard_service import (
    CompetitorNotFoundError,
    DashboardService,
    RefreshInProgressError,
    get_dashboard_service,
)

router = APIRouter(prefix="/competitors", tags=["competitors"])


def _get_record(service: DashboardService, brand_id: str) -> CompetitorData:
    try:
        return service.get_competitor(brand_id)
    except CompetitorNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc


@router.get("", response_model=list[CompetitorSummaryResponse])
def list_competitors(
    search: str = Query(default="", description="Case-insensitive brand name filter"),
    service: DashboardService = Depends(get_dashboard_service),
) -> list[CompetitorSummaryResponse]:
    """
    List tracked brands, optionally filtered by name.
    """

    state = service.state
    return [
        to_summary_response(
            record,
            analyzing=is_analyzing(state, record.id),
            refresh_error=state.refresh_errors.get(record.id),
        )
        for record in filter_competitors(state.competitors, search)
    ]


@router.get("/{brand_id}", response_model=CompetitorResponse)
def get_competitor(
    brand_id: str,
    service: DashboardService = Depends(get_dashboard_service),
) -> CompetitorResponse:
    record = _get_record(service, brand_id)
    state = service.state
    return to_competitor_response(
        record,
        analyzing=is_analyzing(state, brand_id),
        refresh_error=state.refresh_errors.get(brand_id),
    )


@router.post("/{brand_id}/refresh", response_model=CompetitorResponse)
def refresh_competitor(
    brand_id: str,
    service: DashboardService = Depends(get_dashboard_service),
) -> CompetitorResponse:
    """
    Re-analyze one brand through the remote analyzer and replace its record.
    """

    try:
        record = service.refresh(brand_id)
    except CompetitorNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except RefreshInProgressError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc
    except AnalysisError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    return to_competitor_response(record)


@router.get("/{brand_id}/price-distribution", response_model=ProjectionResponse)
def get_price_distribution(
    brand_id: str,
    service: DashboardService = Depends(get_dashboard_service),
) -> ProjectionResponse:
    record = _get_record(service, brand_id)
    return ProjectionResponse(rows=aggregation_service.price_distribution(record))


@router.get("/{brand_id}/category-mix", response_model=ProjectionResponse)
def get_category_mix(
    brand_id: str,
    service: DashboardService = Depends(get_dashboard_service),
) -> ProjectionResponse:
    record = _get_record(service, brand_id)
    return ProjectionResponse(rows=aggregation_service.category_mix(record))


@router.get("/{brand_id}/deep-dive", response_model=ProjectionResponse)
def get_deep_dive(
    brand_id: str,
    service: DashboardService = Depends(get_dashboard_service),
) -> ProjectionResponse:
    record = _get_record(service, brand_id)
    return ProjectionResponse(rows=aggregation_service.assortment_deep_dive(record))


@router.get("/{brand_id}/summary", response_model=BrandSummaryResponse)
def get_brand_summary(
    brand_id: str,
    service: DashboardService = Depends(get_dashboard_service),
) -> BrandSummaryResponse:
    record = _get_record(service, brand_id)
    return BrandSummaryResponse(**aggregation_service.brand_summary(record))
