"""Request/response models for the queue HTTP API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.c1_queue_models.queue_item import QueueItem


class EnqueueRequest(BaseModel):
    """Request model for enqueueing a payload."""

    payload: Optional[str] = Field(default=None, description="Payload to enqueue")


class EnqueueResponse(BaseModel):
    """Response model for enqueue."""

    item: QueueItem
    position: int = Field(..., description="Approximate position in the queue after enqueue")


class DequeueResponse(BaseModel):
    """Response model for dequeue."""

    item: QueueItem


class QueueStatusResponse(BaseModel):
    """Response model for queue status."""

    model_config = ConfigDict(populate_by_name=True)

    count: int = Field(..., description="Current number of items in the queue")
    is_empty: bool = Field(..., alias="isEmpty", description="Whether the queue is empty")


class HealthResponse(BaseModel):
    """Response model for the health check."""

    message: str


class ErrorResponse(BaseModel):
    """Error body returned for rejected requests."""

    error: str
