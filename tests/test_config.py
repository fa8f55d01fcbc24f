"""
tests/test_config.py

Pytest unit tests for environment-driven settings.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from app.config import get_analyzer_settings, get_dashboard_settings

_ENV_VARS = (
    "LLM_ADAPTER",
    "LLM_MODEL",
    "LLM_API_KEY",
    "OPENAI_API_KEY",
    "LLM_MAX_TOKENS",
    "ANALYZER_TIMEOUT_SECONDS",
    "ANALYZER_MAX_FORMAT_RETRIES",
    "MOCK_DATA_SEED",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_analyzer_settings.cache_clear()
    get_dashboard_settings.cache_clear()
    yield
    get_analyzer_settings.cache_clear()
    get_dashboard_settings.cache_clear()


class TestAnalyzerSettings:
    def test_defaults(self) -> None:
        settings = get_analyzer_settings()
        assert settings.adapter == "openai"
        assert settings.timeout_seconds == 120.0
        assert settings.max_format_retries == 0

    def test_mock_adapter_and_key_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_ADAPTER", "MOCK")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        settings = get_analyzer_settings()
        assert settings.adapter == "mock"
        assert settings.api_key == "sk-test"

    def test_unknown_adapter_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_ADAPTER", "gemini")
        assert get_analyzer_settings().adapter == "openai"

    def test_bounds(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_MAX_TOKENS", "10")
        monkeypatch.setenv("ANALYZER_MAX_FORMAT_RETRIES", "-2")
        settings = get_analyzer_settings()
        assert settings.max_output_tokens == 256
        assert settings.max_format_retries == 0


class TestDashboardSettings:
    def test_mock_seed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MOCK_DATA_SEED", "7")
        assert get_dashboard_settings().mock_seed == 7

    def test_invalid_mock_seed_is_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MOCK_DATA_SEED", "seven")
        assert get_dashboard_settings().mock_seed is None

    def test_seed_path_is_absolute(self) -> None:
        assert get_dashboard_settings().seed_path.endswith("competitors.json")
