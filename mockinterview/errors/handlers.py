from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from pymongo.errors import PyMongoError
from loguru import logger
from mockinterview.errors.exceptions import PersistenceError

def http_exception_handler(request: Request, exc: HTTPException):
    content = {"detail": exc.detail}
    error = getattr(exc, "error", None)
    if error is not None:
        content["error"] = error
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )

def generic_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred."},
    )

def persistence_exception_handler(request: Request, exc: PyMongoError):
    """
    Handle MongoDB driver errors that escaped the store layer.

    Connection failures, timeouts and write errors all surface as a
    PersistenceError so clients see one stable message for storage problems.

    Args:
        request: FastAPI request instance
        exc: PyMongoError raised by motor/pymongo

    Returns:
        JSONResponse with 500 status and the driver error as diagnostic detail
    """
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return http_exception_handler(request, PersistenceError(error=str(exc)))
