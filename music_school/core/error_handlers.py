from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from .exceptions import MusicSchoolException

logger = logging.getLogger(__name__)

async def music_school_exception_handler(request: Request, exc: MusicSchoolException):
    """Handle domain exceptions raised by the services"""
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__}: {exc.message} - Path: {request.url.path}")
    else:
        logger.info(f"{exc.__class__.__name__}: {exc.message} - Path: {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "type": exc.__class__.__name__}
    )

async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies and query strings as invalid input"""
    logger.info(f"Request validation failed - Path: {request.url.path}")
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid input",
            "type": "InvalidInputError",
            "details": jsonable_encoder(exc.errors())
        }
    )

async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.exception(f"Unexpected error: {str(exc)} - Path: {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "type": "InternalError"}
    )

def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(MusicSchoolException, music_school_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
