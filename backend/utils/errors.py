# backend/utils/errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# Validation failures are reported with a resource-specific message
VALIDATION_MESSAGES = {
    "/api/auth/register": "Invalid user data",
    "/api/products": "Invalid product data",
    "/api/orders": "Invalid order data",
    "/api/cart": "Invalid cart data",
}


def validation_message(path: str) -> str:
    for prefix, message in VALIDATION_MESSAGES.items():
        if path == prefix or path.startswith(prefix + "/"):
            return message
    return "Invalid request data"


def setup_error_handlers(app: FastAPI):
    """Render every error as a JSON body of the form {"message": ...}."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if isinstance(exc.detail, dict):
            content = exc.detail
        else:
            content = {"message": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = []
        for error in exc.errors():
            errors.append({
                "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
                "message": error["msg"],
            })

        logger.warning("Validation error on %s %s: %s", request.method, request.url.path, errors)
        return JSONResponse(
            status_code=400,
            content={"message": validation_message(request.url.path), "errors": errors},
        )

    @app.exception_handler(OperationalError)
    async def database_error_handler(request: Request, exc: OperationalError):
        logger.error("Database connection issue: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"message": "Service temporarily unavailable. Please try again."},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal Server Error"})
