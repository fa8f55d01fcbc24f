"""Structured output schema for remote assortment analysis."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.domain.assortment import PRICE_BUCKETS


class CategoryCountsOutput(BaseModel):
    """One category entry as returned by the model."""

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
    )

    category: str = Field(min_length=1)
    counts: Dict[str, Optional[float]] = Field(default_factory=dict)


class AssortmentAnalysisOutput(BaseModel):
    """Reply contract for one brand analysis.

    Both fields are optional so that a sparse reply still parses; the
    analyzer decides the defaults.
    """

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    total_styles: Optional[float] = Field(default=None, alias="totalStyles")
    data: Optional[List[CategoryCountsOutput]] = None


def build_response_json_schema() -> Dict[str, Any]:
    """Return the JSON schema sent to the provider as the response format.

    Strict structured output requires every property to be listed as
    required and extra properties to be disallowed.
    """
    bucket_properties = {bucket: {"type": "number"} for bucket in PRICE_BUCKETS}
    return {
        "type": "object",
        "properties": {
            "totalStyles": {"type": "number"},
            "data": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "category": {"type": "string"},
                        "counts": {
                            "type": "object",
                            "properties": bucket_properties,
                            "required": list(PRICE_BUCKETS),
                            "additionalProperties": False,
                        },
                    },
                    "required": ["category", "counts"],
                    "additionalProperties": False,
                },
            },
        },
        "required": ["totalStyles", "data"],
        "additionalProperties": False,
    }
