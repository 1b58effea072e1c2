from stampbook.api.cards import router as cards_router
from stampbook.api.health import router as health_router
from stampbook.api.snapshots import router as snapshots_router

__all__ = [
    "cards_router",
    "health_router",
    "snapshots_router",
]
