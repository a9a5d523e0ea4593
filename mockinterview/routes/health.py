"""
Health check endpoint for the application.

Description:
This module defines a FastAPI route for checking the health status of the
service. It does not require authentication and does not touch MongoDB or the
generation service.

Arguments:
- request: An instance of Request, required for rate limiting.

Returns:
- A JSON response with the status of the service, {"status": "ok"}, and the
  configured environment name.

Dependencies:
- fastapi: For creating the FastAPI application and defining routes.
- mockinterview.core.route_limiters: For rate limiting functionality.
- mockinterview.schemas.health_response: For defining the response model.
- loguru: For logging information about the health check endpoint.

Author: @kcaparas1630

"""
from fastapi import APIRouter, Depends, Request
from mockinterview.core.config import Settings, get_settings
from mockinterview.core.route_limiters import limiter
from mockinterview.schemas.health_response import HealthResponse
from loguru import logger

router = APIRouter(
    prefix="/api",
    tags=["health"],
    responses={404: {"description": "Not found"}}
)

@router.get("/health", response_model=HealthResponse)
@limiter.limit("10/minute")
async def health(request: Request, settings: Settings = Depends(get_settings)):
    """
    Request parameter is required for rate limiting.
    """
    logger.debug("Health check endpoint called")
    return {"status": "ok", "environment": settings.env}
