"""
Health check endpoint.
"""

from fastapi import APIRouter, Request

from app.models.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Report that the service is up."""
    settings = request.app.state.settings
    return HealthResponse(status="OK", service=settings.service_name)
