"""API routers for Feedwatch."""

from feedwatch.api.routes_discover import router as discover_router
from feedwatch.api.routes_feeds import router as feeds_router
from feedwatch.api.routes_health import router as health_router

__all__ = ["discover_router", "feeds_router", "health_router"]
