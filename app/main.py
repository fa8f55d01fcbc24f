from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import Depends, FastAPI

from app.brands.loader import validate_logo_url_template
from app.config import (
    get_analyzer_settings,
    get_dashboard_settings,
    load_env_files,
    resolve_config_path,
)
from app.logging_utils import configure_logging
from app.schemas.assortment import HealthResponse
from app.services.dashboard_service import DashboardService, get_dashboard_service


def _validate_env() -> None:
    """
    Validate all required environment variables at startup.

    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.

    Rules:
    - LLM_ADAPTER must be 'openai' or 'mock' when set.
    - An LLM API key is required only when DASHBOARD_REQUIRE_API_KEY is true
      and the adapter is not the mock.
    - LOGO_URL_TEMPLATE may only use the {name} placeholder.
    - COMPETITOR_SEED_PATH, when set, must point at an existing file.
    """

    load_env_files()

    errors: list[str] = []

    # --- LLM adapter ----------------------------------------------------
    adapter = os.getenv("LLM_ADAPTER", "openai").strip().lower()
    if adapter not in {"openai", "mock"}:
        errors.append(
            f"LLM_ADAPTER='{adapter}' is not valid. Allowed values: ['mock', 'openai']."
        )

    analyzer_settings = get_analyzer_settings()

    # --- LLM API key ----------------------------------------------------
    if get_dashboard_settings().require_api_key and adapter != "mock":
        if not analyzer_settings.api_key:
            errors.append(
                "LLM API key is not set. Provide LLM_API_KEY or OPENAI_API_KEY, "
                "or set LLM_ADAPTER=mock."
            )

    # --- Logo template --------------------------------------------------
    try:
        validate_logo_url_template(analyzer_settings.logo_url_template)
    except ValueError as exc:
        errors.append(f"LOGO_URL_TEMPLATE: {exc}")

    # --- Seed file ------------------------------------------------------
    seed_path = os.getenv("COMPETITOR_SEED_PATH", "").strip()
    if seed_path and not resolve_config_path(seed_path).exists():
        errors.append(f"COMPETITOR_SEED_PATH '{seed_path}' does not exist.")

    if errors:
        raise RuntimeError(
            "Startup validation failed - missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    configure_logging(os.getenv("LOG_LEVEL", "INFO"))


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Seed the brand collection on boot so the first request is not slowed by it."""
    provider = application.dependency_overrides.get(get_dashboard_service, get_dashboard_service)
    service = provider()
    logging.getLogger(__name__).info(
        "Dashboard seeded with %d competitors", len(service.state.competitors)
    )
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="RetailIntel API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import comparison_router, competitor_router

    application.include_router(competitor_router)
    application.include_router(comparison_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck(service: DashboardService = Depends(get_dashboard_service)) -> HealthResponse:
        return HealthResponse(
            status="ok",
            competitors=len(service.state.competitors),
            analyzer=get_analyzer_settings().adapter,
        )

    return application


app = create_app()
