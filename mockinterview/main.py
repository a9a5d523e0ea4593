from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from contextlib import asynccontextmanager
from slowapi import _rate_limit_exceeded_handler
# Rate Limiter
from mockinterview.core.route_limiters import limiter
# Routers
from mockinterview.routes.health import router as health_router
from mockinterview.routes.conversations import router as conversations_router
from mockinterview.routes.ai_conversation import router as ai_conversation_router
# CORS Middleware
from mockinterview.core.cors_middleware import add_cors_middleware
# Logger
from loguru import logger
# Database
from mockinterview.database import close_client, ensure_indexes, get_database
# Error Handling
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY
from pymongo.errors import PyMongoError

from mockinterview.errors.handlers import http_exception_handler, generic_exception_handler, persistence_exception_handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events."""
    # Startup
    try:
        await ensure_indexes(get_database())
        logger.info("Application startup completed successfully")
    except Exception as e:
        logger.error(f"Error during application startup: {e}")
        raise

    yield

    # Shutdown
    close_client()
    logger.info("Application shutdown")

# Initialize FastAPI app
app = FastAPI(
    title="Mock Interview API",
    description="Conversational mock interviews backed by a text-generation service",
    version="0.1.0",
    lifespan=lifespan
)
# Add CORS middleware
add_cors_middleware(app)

# Centralized error handlers
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(PyMongoError, persistence_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors())},
    )

# Add rate limiter to the app
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Include routers
app.include_router(health_router)
app.include_router(conversations_router)
app.include_router(ai_conversation_router)
