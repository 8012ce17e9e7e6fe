"""Queue routes for the queue backend API."""

import logging
from typing import Optional

from fastapi import APIRouter, Body, HTTPException, Response, status
from fastapi.responses import JSONResponse

from src.c1_queue_models.api_models import (
    DequeueResponse,
    EnqueueRequest,
    EnqueueResponse,
    ErrorResponse,
    QueueStatusResponse,
)
from src.c1_queue_models.errors import QueueValidationError

logger = logging.getLogger(__name__)

PAYLOAD_REQUIRED = "Payload is required."


def item_location(item_id) -> str:
    """Location header value for an enqueued item."""
    return f"/api/queue/items/{item_id}"


def create_queue_router(server_state):
    """Create queue router with server_state dependency.

    Args:
        server_state: ServerState instance with queue_store

    Returns:
        APIRouter: Configured router with queue endpoints
    """
    router = APIRouter(prefix="/api/queue", tags=["Queue"])

    @router.post(
        "/enqueue",
        name="Enqueue",
        status_code=status.HTTP_201_CREATED,
        response_model=EnqueueResponse,
        responses={400: {"model": ErrorResponse, "description": "Payload missing or blank"}},
    )
    async def enqueue_endpoint(response: Response, request: Optional[EnqueueRequest] = Body(default=None)):
        """Add a payload to the tail of the queue.

        Returns the created item and its approximate position.
        """
        if request is None or request.payload is None or not request.payload.strip():
            return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": PAYLOAD_REQUIRED})

        try:
            result = await server_state.queue_store.enqueue(request.payload)
        except QueueValidationError:
            return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": PAYLOAD_REQUIRED})
        except Exception as e:
            logger.error(f"Failed to enqueue payload: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        response.headers["Location"] = item_location(result.item.id)
        return EnqueueResponse(item=result.item, position=result.position)

    @router.post(
        "/dequeue",
        name="Dequeue",
        response_model=DequeueResponse,
        responses={204: {"description": "Queue is empty"}},
    )
    async def dequeue_endpoint():
        """Remove and return the item at the head of the queue."""
        try:
            item = await server_state.queue_store.dequeue()
        except Exception as e:
            logger.error(f"Failed to dequeue: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        if item is None:
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return DequeueResponse(item=item)

    @router.get("/status", name="QueueStatus", response_model=QueueStatusResponse)
    async def get_queue_status_endpoint():
        """Get the current item count and whether the queue is empty."""
        try:
            queue_status = await server_state.queue_store.status()
        except Exception as e:
            logger.error(f"Failed to get queue status: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        return QueueStatusResponse(count=queue_status.count, is_empty=queue_status.is_empty)

    return router
