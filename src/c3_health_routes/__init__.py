"""Health check routes."""

from src.c3_health_routes.health_routes import router

__all__ = ["router"]
