"""
app/api/routers package marker.
"""

from app.api.routers.inspections import router as inspections_router

__all__ = [
    "inspections_router",
]
