"""
app/api/routers package marker.
"""

from app.api.routers.export_router import router as export_router
from app.api.routers.samples_router import router as samples_router

__all__ = [
    "export_router",
    "samples_router",
]
