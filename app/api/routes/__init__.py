from __future__ import annotations

from app.api.routes.health import router as health_router
from app.api.routes.love_wall import router as love_wall_router

__all__ = ["health_router", "love_wall_router"]
