"""API route modules."""

from .calendar import router as calendar_router
from .health import router as health_router
from .timezone import router as timezone_router

__all__ = ["calendar_router", "health_router", "timezone_router"]
