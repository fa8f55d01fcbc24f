"""
Seed brand configuration helpers.
"""

from app.brands.loader import SeedCompetitor, build_logo_url, load_seed_competitors

__all__ = [
    "SeedCompetitor",
    "build_logo_url",
    "load_seed_competitors",
]
