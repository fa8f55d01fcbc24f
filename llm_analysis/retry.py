"""Format-error retries for assortment analysis requests.

Only replies that fail validation are retried, and each retry tells the
model what was wrong with its previous reply. Transport and provider
errors raised by the adapter propagate on the first occurrence.
"""

import logging
from dataclasses import dataclass
from typing import List

from llm_analysis.adapter import BaseLLMAdapter, LLMResponse
from llm_analysis.schema import AssortmentAnalysisOutput
from llm_analysis.validator import LLMOutputValidationError, validate_analysis_output

logger = logging.getLogger(__name__)

_CORRECTION_TEMPLATE = (
    "\n\n# CORRECTION\n\n"
    "Your previous reply could not be used ({stage}): {errors}\n"
    "Reply again with ONLY the JSON object described above."
)


@dataclass(frozen=True)
class ValidatedReply:
    """A reply that passed validation, with the attempt it came from."""

    output: AssortmentAnalysisOutput
    response: LLMResponse
    attempts: int


class LLMRetryExhaustedError(Exception):
    """Raised when every attempt returned an unusable reply.

    Attributes:
        attempts: Number of requests sent.
        history: The validation error from each attempt, in order.
    """

    def __init__(self, attempts: int, history: List[LLMOutputValidationError]) -> None:
        self.attempts = attempts
        self.history = history
        super().__init__(
            f"No usable model reply after {attempts} attempt(s). Last error: {history[-1]}"
        )

    @property
    def last_error(self) -> LLMOutputValidationError:
        return self.history[-1]


def correction_prompt(prompt: str, error: LLMOutputValidationError) -> str:
    """Append a correction note describing *error* to the original prompt."""
    return prompt + _CORRECTION_TEMPLATE.format(stage=error.stage, errors="; ".join(error.errors))


def generate_with_retry(
    adapter: BaseLLMAdapter,
    prompt: str,
    max_retries: int = 0,
) -> ValidatedReply:
    """Request an analysis, re-asking on unusable replies.

    Args:
        adapter: Adapter used for every attempt.
        prompt: The analysis prompt.
        max_retries: Extra attempts after a rejected reply. With zero, the
            first validation error is raised as-is.

    Returns:
        The first reply that validates.

    Raises:
        LLMOutputValidationError: The only attempt was rejected.
        LLMRetryExhaustedError: Every attempt was rejected.
    """
    total_attempts = 1 + max(0, max_retries)
    history: List[LLMOutputValidationError] = []
    current_prompt = prompt

    for attempt in range(1, total_attempts + 1):
        response = adapter.generate(current_prompt)
        try:
            output = validate_analysis_output(response.text)
        except LLMOutputValidationError as exc:
            if total_attempts == 1:
                raise
            history.append(exc)
            logger.warning(
                "Analysis reply rejected (attempt %d/%d, stage=%s): %s | reply=%r",
                attempt,
                total_attempts,
                exc.stage,
                "; ".join(exc.errors),
                exc.preview,
            )
            current_prompt = correction_prompt(prompt, exc)
            continue

        if attempt > 1:
            logger.info("Analysis reply accepted on attempt %d/%d", attempt, total_attempts)
        return ValidatedReply(output=output, response=response, attempts=attempt)

    raise LLMRetryExhaustedError(attempts=total_attempts, history=history)
