from packyadmin.api.cards import router as cards_router
from packyadmin.api.dashboard import router as dashboard_router
from packyadmin.api.health import router as health_router
from packyadmin.api.imports import router as imports_router
from packyadmin.api.sets import router as sets_router

__all__ = [
    "cards_router",
    "dashboard_router",
    "health_router",
    "imports_router",
    "sets_router",
]
