"""
app/services/analyzer_service.py

Remote assortment analysis for one brand.

Sends one structured-output request to the configured LLM adapter and maps
the reply back into a CompetitorData record.

Reply mapping
-------------
    missing totalStyles      -> 0
    missing data             -> empty collection (not an error)
    unknown category         -> dropped, logged
    unknown bucket key       -> dropped
    missing bucket           -> 0
    negative / null count    -> 0
    duplicate category       -> counts summed into one entry
    citation without a URI   -> dropped

Every transport, provider, parse or schema failure surfaces as a single
AnalysisError with the original exception chained.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable

from app.brands.loader import build_logo_url
from app.config import AnalyzerSettings, get_analyzer_settings
from app.domain.assortment import (
    CATEGORIES,
    PRICE_BUCKETS,
    CompetitorData,
    GroundingSource,
    StyleCountData,
    category_sort_key,
)
from app.logging_utils import log_event
from app.services.mock_data_service import new_record_id, utc_timestamp
from llm_analysis.adapter import BaseLLMAdapter, Citation, MockLLMAdapter, OpenAILLMAdapter
from llm_analysis.prompt_builder import AssortmentPromptBuilder
from llm_analysis.retry import generate_with_retry
from llm_analysis.schema import AssortmentAnalysisOutput, CategoryCountsOutput

logger = logging.getLogger(__name__)

_UNUSABLE_URIS = frozenset({"", "#"})
_KNOWN_CATEGORIES = frozenset(CATEGORIES)


class AnalysisError(RuntimeError):
    """
    Raised when a remote analysis cannot produce a record.
    """

    def __init__(self, brand: str, reason: str) -> None:
        self.brand = brand
        self.reason = reason
        super().__init__(f"Analysis failed for '{brand}': {reason}")


@dataclass(frozen=True)
class AnalysisResult:
    """
    Outcome of one successful remote analysis.
    """

    record: CompetitorData
    sources: tuple[GroundingSource, ...]


def build_adapter(settings: AnalyzerSettings) -> BaseLLMAdapter:
    """
    Instantiate the adapter selected by settings.adapter.

    LLM_ADAPTER=mock   -> MockLLMAdapter   (offline, no API key required)
    LLM_ADAPTER=openai -> OpenAILLMAdapter (default)
    """

    if settings.adapter == "mock":
        return MockLLMAdapter()

    return OpenAILLMAdapter(
        model=settings.model,
        max_output_tokens=settings.max_output_tokens,
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout_seconds=settings.timeout_seconds,
        web_search=settings.web_search,
    )


def extract_sources(citations: Iterable[Citation]) -> tuple[GroundingSource, ...]:
    """
    Map citations to sources, dropping entries without a usable URI.
    """

    sources: list[GroundingSource] = []
    seen: set[str] = set()
    for citation in citations:
        uri = (citation.uri or "").strip()
        if uri in _UNUSABLE_URIS or uri in seen:
            continue
        seen.add(uri)
        title = (citation.title or "").strip() or "Source"
        sources.append(GroundingSource(title=title, uri=uri))
    return tuple(sources)


def _coerce_count(value: float | None) -> int:
    if value is None or not math.isfinite(value) or value < 0:
        return 0
    return int(value)


def map_category_entries(entries: Iterable[CategoryCountsOutput]) -> tuple[StyleCountData, ...]:
    """
    Normalize model category entries into domain entries in category order.
    """

    merged: dict[str, dict[str, int]] = {}
    for entry in entries:
        if entry.category not in _KNOWN_CATEGORIES:
            logger.warning("Dropping unknown category from analysis reply: %r", entry.category)
            continue
        counts = merged.setdefault(entry.category, {bucket: 0 for bucket in PRICE_BUCKETS})
        for bucket in PRICE_BUCKETS:
            counts[bucket] += _coerce_count(entry.counts.get(bucket))

    return tuple(
        StyleCountData(category=category, counts=counts)
        for category, counts in sorted(merged.items(), key=lambda item: category_sort_key(item[0]))
    )


class CompetitorAnalyzer:
    """
    Runs one remote analysis per call and maps the reply to a record.
    """

    def __init__(
        self,
        *,
        adapter: BaseLLMAdapter,
        settings: AnalyzerSettings | None = None,
        prompt_builder: AssortmentPromptBuilder | None = None,
    ) -> None:
        self._adapter = adapter
        self._settings = settings or AnalyzerSettings()
        self._prompt_builder = prompt_builder or AssortmentPromptBuilder()

    def analyze(self, name: str, url: str) -> AnalysisResult:
        """
        Analyze *name* at *url* and return a fresh record plus its sources.

        Raises AnalysisError on any failure.
        """

        prompt = self._prompt_builder.build_prompt(name, url)
        log_event(logger, logging.INFO, "analysis_started", brand=name, url=url)

        try:
            reply = generate_with_retry(
                self._adapter,
                prompt,
                max_retries=self._settings.max_format_retries,
            )
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger,
                logging.ERROR,
                "analysis_failed",
                brand=name,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise AnalysisError(name, str(exc)) from exc

        sources = extract_sources(reply.response.citations)
        record = self._build_record(name, url, reply.output, sources)
        log_event(
            logger,
            logging.INFO,
            "analysis_completed",
            brand=name,
            attempts=reply.attempts,
            categories=len(record.data),
            total_styles=record.total_styles,
            sources=len(sources),
        )
        return AnalysisResult(record=record, sources=sources)

    def _build_record(
        self,
        name: str,
        url: str,
        output: AssortmentAnalysisOutput,
        sources: tuple[GroundingSource, ...],
    ) -> CompetitorData:
        return CompetitorData(
            id=new_record_id(),
            name=name,
            url=url,
            logo=build_logo_url(name, self._settings.logo_url_template),
            last_updated=utc_timestamp(),
            total_styles=_coerce_count(output.total_styles),
            data=map_category_entries(output.data or []),
            sources=sources,
        )


@lru_cache(maxsize=1)
def get_competitor_analyzer() -> CompetitorAnalyzer:
    """
    Build and cache the analyzer from environment settings.
    """

    settings = get_analyzer_settings()
    return CompetitorAnalyzer(adapter=build_adapter(settings), settings=settings)
