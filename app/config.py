"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_ALLOWED_ADAPTERS = {"openai", "mock"}

DEFAULT_LOGO_URL_TEMPLATE = "https://picsum.photos/seed/{name}/200/200"
DEFAULT_SEED_PATH = "app/brands/competitors.json"


def project_root() -> Path:
    return Path(__file__).resolve().parents[1]


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    for filename in (".env", ".env.local"):
        env_path = project_root() / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def resolve_config_path(raw_path: str) -> Path:
    candidate = Path(raw_path)
    if candidate.is_absolute():
        return candidate
    return (project_root() / candidate).resolve()


@dataclass(frozen=True)
class AnalyzerSettings:
    """
    Remote assortment analyzer settings.
    """

    adapter: str = "openai"
    model: str = "gpt-4o"
    api_key: str | None = None
    base_url: str | None = None
    timeout_seconds: float = 120.0
    max_output_tokens: int = 8192
    max_format_retries: int = 0
    web_search: bool = True
    logo_url_template: str = DEFAULT_LOGO_URL_TEMPLATE


@dataclass(frozen=True)
class DashboardSettings:
    """
    Runtime settings for the dashboard state owner.
    """

    seed_path: str = DEFAULT_SEED_PATH
    mock_seed: int | None = None
    require_api_key: bool = False
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_analyzer_settings() -> AnalyzerSettings:
    """
    Return cached analyzer settings from environment variables.

    Unknown LLM_ADAPTER values fall back to 'openai'.
    """

    adapter = _get_str_env("LLM_ADAPTER", "openai").lower()
    if adapter not in _ALLOWED_ADAPTERS:
        adapter = "openai"

    return AnalyzerSettings(
        adapter=adapter,
        model=_get_str_env("LLM_MODEL", "gpt-4o"),
        api_key=_get_optional_str_env("LLM_API_KEY") or _get_optional_str_env("OPENAI_API_KEY"),
        base_url=_get_optional_str_env("LLM_BASE_URL"),
        timeout_seconds=max(1.0, _get_float_env("ANALYZER_TIMEOUT_SECONDS", 120.0)),
        max_output_tokens=max(256, _get_int_env("LLM_MAX_TOKENS", 8192)),
        max_format_retries=max(0, _get_int_env("ANALYZER_MAX_FORMAT_RETRIES", 0)),
        web_search=_get_bool_env("LLM_WEB_SEARCH", True),
        logo_url_template=_get_str_env("LOGO_URL_TEMPLATE", DEFAULT_LOGO_URL_TEMPLATE),
    )


@lru_cache(maxsize=1)
def get_dashboard_settings() -> DashboardSettings:
    """
    Return cached dashboard settings from environment variables.
    """

    raw_seed = _get_optional_str_env("MOCK_DATA_SEED")
    mock_seed: int | None = None
    if raw_seed is not None:
        try:
            mock_seed = int(raw_seed)
        except ValueError:
            mock_seed = None

    return DashboardSettings(
        seed_path=str(resolve_config_path(_get_str_env("COMPETITOR_SEED_PATH", DEFAULT_SEED_PATH))),
        mock_seed=mock_seed,
        require_api_key=_get_bool_env("DASHBOARD_REQUIRE_API_KEY", False),
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )
