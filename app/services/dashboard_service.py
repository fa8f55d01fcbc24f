"""
app/services/dashboard_service.py

Owner of the in-memory brand collection.

Holds the current DashboardState behind a lock and routes every change
through the reducer. Refresh runs the remote analyzer outside the lock and
allows at most one outstanding request per brand id.
"""

from __future__ import annotations

import logging
import random
import threading
from functools import lru_cache

from app.brands.loader import load_seed_competitors
from app.config import get_analyzer_settings, get_dashboard_settings
from app.domain.assortment import CompetitorData
from app.domain.dashboard import (
    Action,
    DashboardState,
    LoadCompetitors,
    RefreshFailed,
    RefreshStarted,
    RefreshSucceeded,
    find_competitor,
    is_analyzing,
    reduce,
)
from app.logging_utils import log_event
from app.services.analyzer_service import AnalysisError, CompetitorAnalyzer, get_competitor_analyzer
from app.services.mock_data_service import seed_competitors

logger = logging.getLogger(__name__)


class CompetitorNotFoundError(LookupError):
    """
    Raised when a brand id is not part of the collection.
    """

    def __init__(self, brand_id: str) -> None:
        self.brand_id = brand_id
        super().__init__(f"Unknown competitor id: {brand_id}")


class RefreshInProgressError(RuntimeError):
    """
    Raised when a refresh is requested for a brand that already has one running.
    """

    def __init__(self, brand_id: str) -> None:
        self.brand_id = brand_id
        super().__init__(f"A refresh is already running for competitor id: {brand_id}")


class DashboardService:
    """
    Serializes state updates and coordinates per-brand refreshes.
    """

    def __init__(
        self,
        *,
        analyzer: CompetitorAnalyzer,
        initial_state: DashboardState | None = None,
    ) -> None:
        self._analyzer = analyzer
        self._state = initial_state or DashboardState()
        self._lock = threading.Lock()

    @property
    def state(self) -> DashboardState:
        with self._lock:
            return self._state

    def dispatch(self, action: Action) -> DashboardState:
        with self._lock:
            self._state = reduce(self._state, action)
            return self._state

    def load(self, competitors: list[CompetitorData]) -> DashboardState:
        log_event(logger, logging.INFO, "competitors_loaded", count=len(competitors))
        return self.dispatch(LoadCompetitors(competitors=tuple(competitors)))

    def get_competitor(self, brand_id: str) -> CompetitorData:
        record = find_competitor(self.state, brand_id)
        if record is None:
            raise CompetitorNotFoundError(brand_id)
        return record

    def refresh(self, brand_id: str) -> CompetitorData:
        """
        Re-analyze one brand and swap in the new record.

        Raises
        ------
        CompetitorNotFoundError
            *brand_id* is not in the collection.
        RefreshInProgressError
            A refresh for *brand_id* is already outstanding.
        AnalysisError
            The remote analysis failed; prior data is kept and the failure
            is recorded in ``state.refresh_errors``.
        """

        with self._lock:
            current = find_competitor(self._state, brand_id)
            if current is None:
                raise CompetitorNotFoundError(brand_id)
            if is_analyzing(self._state, brand_id):
                log_event(logger, logging.WARNING, "refresh_rejected", brand_id=brand_id, brand=current.name)
                raise RefreshInProgressError(brand_id)
            self._state = reduce(self._state, RefreshStarted(brand_id=brand_id))

        try:
            result = self._analyzer.analyze(current.name, current.url)
        except AnalysisError as exc:
            self.dispatch(RefreshFailed(brand_id=brand_id, message=exc.reason))
            log_event(logger, logging.ERROR, "refresh_failed", brand_id=brand_id, brand=current.name, error=exc.reason)
            raise
        except BaseException:
            self.dispatch(RefreshFailed(brand_id=brand_id, message="Refresh interrupted."))
            raise

        state = self.dispatch(RefreshSucceeded(brand_id=brand_id, record=result.record))
        log_event(logger, logging.INFO, "refresh_completed", brand_id=brand_id, brand=current.name)
        refreshed = find_competitor(state, brand_id)
        return refreshed if refreshed is not None else result.record


def build_initial_competitors() -> list[CompetitorData]:
    """
    Synthesize one mock record per configured seed brand.
    """

    settings = get_dashboard_settings()
    seeds = load_seed_competitors(
        config_path=settings.seed_path,
        logo_url_template=get_analyzer_settings().logo_url_template,
    )
    rng = random.Random(settings.mock_seed) if settings.mock_seed is not None else None
    return seed_competitors(seeds, rng=rng)


def create_dashboard_service(analyzer: CompetitorAnalyzer | None = None) -> DashboardService:
    service = DashboardService(analyzer=analyzer or get_competitor_analyzer())
    service.load(build_initial_competitors())
    return service


@lru_cache(maxsize=1)
def get_dashboard_service() -> DashboardService:
    """
    Build and cache the process-wide dashboard service.
    """

    return create_dashboard_service()
