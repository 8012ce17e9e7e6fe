"""Health check routes for the queue backend API."""

from fastapi import APIRouter

from src.c1_queue_models.api_models import HealthResponse

router = APIRouter(tags=["System"])


@router.get("/", name="HealthCheck", response_model=HealthResponse)
async def health_check():
    """Health check endpoint.

    Returns:
        dict: Health message
    """
    return {"message": "Healthy"}
