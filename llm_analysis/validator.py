"""Validation of raw model replies for assortment analysis.

Web-search grounded replies sometimes wrap the JSON body in prose or code
fences even when a response format is requested, so the body is located
before parsing.
"""

import json
import re
from typing import List

from pydantic import ValidationError

from llm_analysis.schema import AssortmentAnalysisOutput

STAGE_JSON_PARSE = "json_parse"
STAGE_SCHEMA = "schema"

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)
_PREVIEW_CHARS = 200


class LLMOutputValidationError(Exception):
    """Raised when a reply cannot be read as an assortment analysis.

    Attributes:
        stage: ``"json_parse"`` or ``"schema"``.
        errors: Human-readable problems, one per entry.
        raw_response: The reply text exactly as received.
    """

    def __init__(self, stage: str, errors: List[str], raw_response: str) -> None:
        self.stage = stage
        self.errors = errors
        self.raw_response = raw_response
        super().__init__(f"Model reply rejected at stage '{stage}': " + "; ".join(errors))

    @property
    def preview(self) -> str:
        """Leading slice of the raw reply, for log lines."""
        text = (self.raw_response or "").strip()
        if len(text) <= _PREVIEW_CHARS:
            return text
        return text[:_PREVIEW_CHARS] + "..."


def extract_json_body(text: str) -> str:
    """Return the JSON object text embedded in a model reply.

    Order of preference: the contents of a fenced block, then the span from
    the first ``{`` to the last ``}``, then the stripped text itself. A body
    that opens with ``[`` is returned whole so that a top-level array is
    rejected rather than mined for an inner object. An empty reply yields
    ``"{}"``.
    """
    stripped = (text or "").strip()
    if not stripped:
        return "{}"

    fenced = _FENCE_PATTERN.search(stripped)
    if fenced:
        stripped = fenced.group(1).strip()

    if stripped.startswith("["):
        return stripped

    start = stripped.find("{")
    end = stripped.rfind("}")
    if start != -1 and end > start:
        return stripped[start : end + 1]
    return stripped


def _describe(exc: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
        for error in exc.errors()
    ]


def validate_analysis_output(raw_response: str) -> AssortmentAnalysisOutput:
    """Parse a reply into an AssortmentAnalysisOutput.

    Args:
        raw_response: Text returned by the adapter.

    Returns:
        The validated reply. Missing ``totalStyles`` or ``data`` are left as
        ``None`` for the caller to default.

    Raises:
        LLMOutputValidationError: The body is not JSON, is not an object,
            or does not match the schema.
    """
    body = extract_json_body(raw_response)

    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise LLMOutputValidationError(STAGE_JSON_PARSE, [str(exc)], raw_response) from exc

    if not isinstance(data, dict):
        raise LLMOutputValidationError(
            STAGE_SCHEMA,
            [f"expected a JSON object, got {type(data).__name__}"],
            raw_response,
        )

    try:
        return AssortmentAnalysisOutput.model_validate(data)
    except ValidationError as exc:
        raise LLMOutputValidationError(STAGE_SCHEMA, _describe(exc), raw_response) from exc
