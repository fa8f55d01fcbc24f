"""
tests/test_api_contract.py

HTTP contract tests for the RetailIntel API.

The dashboard service is swapped for a seeded, mock-backed instance through
FastAPI dependency overrides; no network access.
"""

from __future__ import annotations

import random
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from app.config import AnalyzerSettings, get_analyzer_settings, get_dashboard_settings
from app.domain.assortment import CATEGORIES, PRICE_BUCKETS
from app.main import create_app
from app.services.analyzer_service import CompetitorAnalyzer
from app.services.dashboard_service import DashboardService, get_dashboard_service
from app.services.mock_data_service import generate_mock_data
from llm_analysis.adapter import BaseLLMAdapter, LLMResponse, MockLLMAdapter

_REPLY = {"totalStyles": 3, "data": [{"category": "Polos", "counts": {"Under $100": 3}}]}


class _BrokenAdapter(BaseLLMAdapter):
    def generate(self, prompt: str) -> LLMResponse:
        raise RuntimeError("upstream 500")


def _build_service(adapter: BaseLLMAdapter) -> DashboardService:
    rng = random.Random(11)
    service = DashboardService(
        analyzer=CompetitorAnalyzer(adapter=adapter, settings=AnalyzerSettings(adapter="mock"))
    )
    service.load(
        [
            generate_mock_data("Buck Mason", "https://www.buckmason.com", rng=rng),
            generate_mock_data("Todd Snyder", "https://www.toddsnyder.com", rng=rng),
        ]
    )
    return service


@pytest.fixture()
def service() -> DashboardService:
    return _build_service(MockLLMAdapter(payload=_REPLY))


@pytest.fixture()
def client(service: DashboardService, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    monkeypatch.setenv("LLM_ADAPTER", "mock")
    application = create_app()
    application.dependency_overrides[get_dashboard_service] = lambda: service
    with TestClient(application) as test_client:
        yield test_client


def _id_for(service: DashboardService, name: str) -> str:
    return next(record.id for record in service.state.competitors if record.name == name)


# ---------------------------------------------------------------------------
# Brands
# ---------------------------------------------------------------------------


class TestCompetitorEndpoints:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["competitors"] == 2

    def test_list_and_search(self, client: TestClient) -> None:
        assert [item["name"] for item in client.get("/competitors").json()] == ["Buck Mason", "Todd Snyder"]

        filtered = client.get("/competitors", params={"search": "todd"}).json()
        assert [item["name"] for item in filtered] == ["Todd Snyder"]
        assert filtered[0]["analyzing"] is False

    def test_detail(self, client: TestClient, service: DashboardService) -> None:
        brand_id = _id_for(service, "Buck Mason")
        body = client.get(f"/competitors/{brand_id}").json()
        assert body["id"] == brand_id
        assert len(body["data"]) == len(CATEGORIES)
        assert body["sources"] == []

    def test_unknown_brand_is_404(self, client: TestClient) -> None:
        assert client.get("/competitors/missing").status_code == 404
        assert client.get("/competitors/missing/price-distribution").status_code == 404
        assert client.post("/competitors/missing/refresh").status_code == 404

    def test_refresh_replaces_record(self, client: TestClient, service: DashboardService) -> None:
        brand_id = _id_for(service, "Todd Snyder")
        response = client.post(f"/competitors/{brand_id}/refresh")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == brand_id
        assert body["total_styles"] == 3
        assert body["sources"] == [{"title": "Mock catalog snapshot", "uri": "https://example.com/catalog"}]

    def test_refresh_in_flight_is_409(self, client: TestClient, service: DashboardService) -> None:
        from app.domain.dashboard import RefreshStarted

        brand_id = _id_for(service, "Buck Mason")
        service.dispatch(RefreshStarted(brand_id=brand_id))
        assert client.post(f"/competitors/{brand_id}/refresh").status_code == 409

    def test_projections(self, client: TestClient, service: DashboardService) -> None:
        brand_id = _id_for(service, "Buck Mason")

        distribution = client.get(f"/competitors/{brand_id}/price-distribution").json()["rows"]
        assert [row["bucket"] for row in distribution] == list(PRICE_BUCKETS)

        mix = client.get(f"/competitors/{brand_id}/category-mix").json()["rows"]
        totals = [row["total"] for row in mix]
        assert totals == sorted(totals, reverse=True)

        deep_dive = client.get(f"/competitors/{brand_id}/deep-dive").json()["rows"]
        assert len(deep_dive) == len(CATEGORIES)

        summary = client.get(f"/competitors/{brand_id}/summary").json()
        assert 0.0 <= summary["high_tier_share"] <= 1.0


def test_refresh_failure_is_502() -> None:
    broken = _build_service(_BrokenAdapter())
    application = create_app()
    application.dependency_overrides[get_dashboard_service] = lambda: broken

    with TestClient(application) as test_client:
        brand_id = _id_for(broken, "Buck Mason")
        response = test_client.post(f"/competitors/{brand_id}/refresh")
        listed = test_client.get("/competitors").json()

    assert response.status_code == 502
    assert "upstream 500" in response.json()["detail"]
    failed = next(item for item in listed if item["id"] == brand_id)
    assert "upstream 500" in failed["refresh_error"]
    assert failed["analyzing"] is False


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


class TestComparisonEndpoints:
    def test_assortment(self, client: TestClient) -> None:
        rows = client.get("/comparison/assortment").json()["rows"]
        totals = [row["total_styles"] for row in rows]
        assert totals == sorted(totals, reverse=True)

    def test_pricing_curve_and_heatmap(self, client: TestClient) -> None:
        curve = client.get("/comparison/pricing-curve").json()["rows"]
        assert len(curve) == len(PRICE_BUCKETS)
        assert set(curve[0]) == {"bucket", "Buck Mason", "Todd Snyder"}

        heatmap = client.get("/comparison/heatmap").json()["rows"]
        assert [row["category"] for row in heatmap] == list(CATEGORIES)

    def test_drilldown(self, client: TestClient) -> None:
        rows = client.get("/comparison/drilldown", params={"category": "Polos"}).json()["rows"]
        assert [row["brand"] for row in rows] == ["Buck Mason", "Todd Snyder"]

        default_rows = client.get("/comparison/drilldown").json()["rows"]
        assert len(default_rows) == 2

    def test_drilldown_unknown_category_is_400(self, client: TestClient) -> None:
        assert client.get("/comparison/drilldown", params={"category": "Hats"}).status_code == 400

    def test_market_summary(self, client: TestClient) -> None:
        body = client.get("/comparison/summary").json()
        assert body["volume_leader"]["name"] in {"Buck Mason", "Todd Snyder"}
        assert body["premium_leader"] is not None


# ---------------------------------------------------------------------------
# Startup validation
# ---------------------------------------------------------------------------


class TestStartupValidation:
    @pytest.fixture(autouse=True)
    def _fresh_settings(self, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
        for name in ("LLM_API_KEY", "OPENAI_API_KEY", "LOGO_URL_TEMPLATE", "DASHBOARD_REQUIRE_API_KEY"):
            monkeypatch.delenv(name, raising=False)
        get_analyzer_settings.cache_clear()
        get_dashboard_settings.cache_clear()
        yield
        get_analyzer_settings.cache_clear()
        get_dashboard_settings.cache_clear()

    def test_unknown_logo_placeholder_fails_startup(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_ADAPTER", "mock")
        monkeypatch.setenv("LOGO_URL_TEMPLATE", "https://logos.example/{brand}.png")
        with pytest.raises(RuntimeError, match="LOGO_URL_TEMPLATE"):
            create_app()

    def test_required_key_comes_from_dashboard_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_ADAPTER", "openai")
        monkeypatch.setenv("DASHBOARD_REQUIRE_API_KEY", "yes")
        assert get_dashboard_settings().require_api_key is True
        with pytest.raises(RuntimeError, match="LLM API key is not set"):
            create_app()

    def test_key_not_required_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_ADAPTER", "openai")
        assert create_app().title == "RetailIntel API"
