"""Structured prompt builder for competitor assortment analysis."""

import json
from typing import Iterable

from app.domain.assortment import CATEGORIES, PRICE_BUCKETS
from llm_analysis.schema import build_response_json_schema

_SCHEMA_JSON = json.dumps(build_response_json_schema(), indent=2)

_SYSTEM_INSTRUCTIONS = """\
You are a retail merchandising analyst.

CRITICAL DATA INTEGRITY RULES:
1. Count FULL PRICE styles (unique products) only. Exclude all sale and clearance items.
2. Perform a CATEGORY-PRICE SANITY CHECK. Dress Shirts for most brands sit in the
   $100-$250 range; do not attribute a category to implausible price tiers (for example
   $800+ shirts) unless the brand's catalog specifically supports it, such as a
   luxury or bespoke line.
3. Distinguish core volume drivers from halo or luxury pieces. Halo items must not
   inflate the counts of a category's typical price tiers.
4. Return strictly valid JSON matching the schema defined below.
5. Do NOT include any text outside the JSON object.
"""


class AssortmentPromptBuilder:
    """Builds the analysis instruction for one brand.

    The category and price bucket enumerations are embedded verbatim so the
    model answers with labels the dashboard can map back.
    """

    def __init__(
        self,
        categories: Iterable[str] = CATEGORIES,
        price_buckets: Iterable[str] = PRICE_BUCKETS,
    ) -> None:
        self._categories = list(categories)
        self._price_buckets = list(price_buckets)

    def build_prompt(self, name: str, url: str) -> str:
        """Build the full analysis prompt.

        Args:
            name: Brand display name.
            url: Storefront URL to analyze.

        Returns:
            A fully formatted prompt string ready for LLM consumption.
        """
        return (
            f"{_SYSTEM_INSTRUCTIONS}\n"
            f"# TASK\n\n"
            f'Perform a detailed retail analysis of the competitor "{name}" at {url}.\n'
            f"Determine how many FULL PRICE styles are currently offered in each "
            f"category below.\n\n"
            f"# CATEGORIES TO MONITOR\n\n"
            f"{', '.join(self._categories)}\n\n"
            f"# PRICE BUCKETS\n\n"
            f"For each category, bucket the counts of FULL PRICE styles into these "
            f"price ranges:\n"
            f"{', '.join(self._price_buckets)}\n\n"
            f"# OUTPUT SCHEMA\n\n"
            f"Your response MUST conform to this JSON schema:\n\n"
            f"```json\n{_SCHEMA_JSON}\n```\n\n"
            f"Provide an accurate estimation based on the current website structure "
            f"and available catalog data."
        )
