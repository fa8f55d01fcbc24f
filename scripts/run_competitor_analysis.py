"""
Run a single competitor assortment analysis from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict

from app.config import get_analyzer_settings, get_dashboard_settings
from app.logging_utils import configure_logging
from app.services.analyzer_service import AnalysisError, CompetitorAnalyzer, build_adapter
from llm_analysis.adapter import MockLLMAdapter


def main() -> int:
    parser = argparse.ArgumentParser(description="Analyze one competitor's full-price assortment.")
    parser.add_argument("--name", required=True, help="Brand name, e.g. 'Buck Mason'.")
    parser.add_argument("--url", required=True, help="Brand storefront URL.")
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use the offline mock adapter instead of the remote model.",
    )
    args = parser.parse_args()

    configure_logging(get_dashboard_settings().log_level)
    settings = get_analyzer_settings()
    adapter = MockLLMAdapter() if args.mock else build_adapter(settings)
    analyzer = CompetitorAnalyzer(adapter=adapter, settings=settings)

    try:
        result = analyzer.analyze(args.name, args.url)
    except AnalysisError as exc:
        logging.getLogger(__name__).error("Analysis failed: %s", exc)
        print(json.dumps({"brand": exc.brand, "status": "failed", "error": exc.reason}, indent=2))
        return 1

    print(json.dumps(asdict(result.record), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
