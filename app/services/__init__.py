"""
app/services package marker.
"""

from app.services.analyzer_service import (
    AnalysisError,
    CompetitorAnalyzer,
    get_competitor_analyzer,
)
from app.services.dashboard_service import (
    CompetitorNotFoundError,
    DashboardService,
    RefreshInProgressError,
    get_dashboard_service,
)
from app.services.mock_data_service import generate_mock_data

__all__ = [
    "AnalysisError",
    "CompetitorAnalyzer",
    "CompetitorNotFoundError",
    "DashboardService",
    "RefreshInProgressError",
    "generate_mock_data",
    "get_competitor_analyzer",
    "get_dashboard_service",
]
