from __future__ import annotations

from paramtree.api.routes.config import router as config_router
from paramtree.api.routes.health import router as health_router

__all__ = ["config_router", "health_router"]
