"""
app/api/routers package marker.
"""

from app.api.routers.comparison_router import router as comparison_router
from app.api.routers.competitor_router import router as competitor_router

__all__ = [
    "comparison_router",
    "competitor_router",
]
