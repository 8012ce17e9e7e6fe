"""Queue API routes."""

from src.c3_queue_routes.queue_routes import create_queue_router

__all__ = ["create_queue_router"]
