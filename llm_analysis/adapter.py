"""LLM adapters for remote assortment analysis.

Provides a base interface and concrete adapters for the OpenAI Responses
API (web-search grounded, JSON-schema constrained) and a deterministic
mock for offline use and testing.
"""

import hashlib
import json
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from llm_analysis.schema import build_response_json_schema


@dataclass(frozen=True)
class Citation:
    """One grounding reference attached to a model reply."""

    title: Optional[str]
    uri: Optional[str]


@dataclass(frozen=True)
class LLMResponse:
    """Raw model reply: the JSON body plus any citation metadata."""

    text: str
    citations: List[Citation] = field(default_factory=list)


class BaseLLMAdapter(ABC):
    """Abstract base for all LLM adapters."""

    @abstractmethod
    def generate(self, prompt: str) -> LLMResponse:
        """Send a prompt to the LLM and return the raw response.

        Args:
            prompt: The fully formatted prompt string.

        Returns:
            Raw response text (expected to be JSON) and citations.
        """


class OpenAILLMAdapter(BaseLLMAdapter):
    """Adapter for the OpenAI Responses API.

    Requests structured JSON output constrained to the assortment schema
    and, when enabled, grounds the answer with the hosted web search tool.
    Citations are read from ``url_citation`` annotations.
    """

    def __init__(
        self,
        model: str = "gpt-4o",
        max_output_tokens: int = 8192,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = 120.0,
        web_search: bool = True,
    ) -> None:
        """Initialise the OpenAI adapter.

        Args:
            model: Model identifier.
            max_output_tokens: Maximum tokens in the reply.
            api_key: OpenAI API key. The SDK falls back to OPENAI_API_KEY.
            base_url: Optional base URL for OpenAI-compatible endpoints.
            timeout_seconds: Per-request timeout.
            web_search: Attach the hosted web search tool.
        """
        self._client_kwargs: Dict[str, Any] = {"timeout": timeout_seconds, "max_retries": 0}
        if api_key:
            self._client_kwargs["api_key"] = api_key
        if base_url:
            self._client_kwargs["base_url"] = base_url
        self._client: Any = None
        self._model = model
        self._max_output_tokens = max_output_tokens
        self._web_search = web_search

    def _get_client(self) -> Any:
        """Create the SDK client on first use.

        A missing API key then fails the first request instead of startup.
        """
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(**self._client_kwargs)
        return self._client

    def generate(self, prompt: str) -> LLMResponse:
        """Call the Responses API.

        Args:
            prompt: The fully formatted prompt string.

        Returns:
            Output text and extracted citations.
        """
        request: Dict[str, Any] = {
            "model": self._model,
            "input": prompt,
            "max_output_tokens": self._max_output_tokens,
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "assortment_analysis",
                    "schema": build_response_json_schema(),
                    "strict": True,
                }
            },
        }
        if self._web_search:
            request["tools"] = [{"type": "web_search"}]

        response = self._get_client().responses.create(**request)
        return LLMResponse(
            text=response.output_text or "",
            citations=extract_citations(response),
        )


def extract_citations(response: Any) -> List[Citation]:
    """Collect ``url_citation`` annotations from a Responses API reply."""
    citations: List[Citation] = []
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for content in getattr(item, "content", None) or []:
            if getattr(content, "type", None) != "output_text":
                continue
            for annotation in getattr(content, "annotations", None) or []:
                if getattr(annotation, "type", None) != "url_citation":
                    continue
                citations.append(
                    Citation(
                        title=getattr(annotation, "title", None),
                        uri=getattr(annotation, "url", None),
                    )
                )
    return citations


# ---------------------------------------------------------------------------
# Deterministic mock used for local runs and tests.
# ---------------------------------------------------------------------------
_MOCK_CITATIONS = [
    Citation(title="Mock catalog snapshot", uri="https://example.com/catalog"),
]


class MockLLMAdapter(BaseLLMAdapter):
    """Deterministic adapter that returns a valid assortment reply.

    Without an explicit payload, counts are synthesized from the offline
    profile table using an RNG seeded by the prompt, so the same brand
    always gets the same reply.
    """

    def __init__(
        self,
        payload: Optional[Dict[str, Any]] = None,
        citations: Optional[List[Citation]] = None,
    ) -> None:
        self._payload = payload
        self._citations = list(_MOCK_CITATIONS if citations is None else citations)

    def generate(self, prompt: str) -> LLMResponse:
        """Return a JSON reply for the prompt.

        Args:
            prompt: Used only to seed the synthesized counts.

        Returns:
            A JSON string matching the assortment schema, plus citations.
        """
        payload = self._payload if self._payload is not None else _synthesize_payload(prompt)
        return LLMResponse(text=json.dumps(payload, indent=2), citations=list(self._citations))


def _synthesize_payload(prompt: str) -> Dict[str, Any]:
    from app.services.mock_data_service import generate_mock_data

    seed = int(hashlib.sha256(prompt.encode("utf-8")).hexdigest()[:16], 16)
    record = generate_mock_data("mock", "", rng=random.Random(seed), premium=False)
    return {
        "totalStyles": record.total_styles,
        "data": [{"category": entry.category, "counts": dict(entry.counts)} for entry in record.data],
    }
