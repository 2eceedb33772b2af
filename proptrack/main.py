# proptrack/main.py
"""
ASGI application: logging, middleware, error mapping and routes.

Service exceptions carry no HTTP knowledge; the handlers below turn
them into ``ErrorDetail`` bodies:

    ValidationError          -> 400
    OwnerNotFoundError       -> 404
    NotFoundError            -> 404
    ServiceError             -> 500
    RequestValidationError   -> 422

Database errors are not caught here and surface as plain 500s.
"""

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from proptrack.config import settings
from proptrack.database import check_database_health, get_db
from proptrack.middleware import CorrelationIdMiddleware
from proptrack.routers import portfolio_router
from proptrack.schemas.errors import ErrorDetail, ValidationErrorDetail
from proptrack.services.exceptions import (
    NotFoundError,
    OwnerNotFoundError,
    ServiceError,
    ValidationError,
)
from proptrack.utils import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

HTTP_ERROR_NAMES = {
    400: "BadRequestError",
    404: "NotFoundError",
    405: "MethodNotAllowedError",
    500: "InternalServerError",
    503: "ServiceUnavailableError",
}

app = FastAPI(
    title=settings.app_name,
    description="Valuation, equity, LVR, cash flow and yield reporting for property portfolios",
    version="0.1.0",
)
app.add_middleware(CorrelationIdMiddleware)


def error_response(
        status_code: int,
        error: str,
        message: str,
        details: dict | None = None,
        headers: dict | None = None,
) -> JSONResponse:
    body = ErrorDetail(error=error, message=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


@app.exception_handler(ValidationError)
async def handle_invalid_option(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning(f"Rejected {request.url.path}: {exc}")
    details = None
    if exc.field:
        details = {"field": exc.field}
        if exc.valid_options is not None:
            details["valid_options"] = exc.valid_options
    return error_response(400, type(exc).__name__, str(exc), details)


@app.exception_handler(OwnerNotFoundError)
async def handle_unknown_owner(request: Request, exc: OwnerNotFoundError) -> JSONResponse:
    logger.info(f"Unknown portfolio owner {exc.owner_id}")
    return error_response(404, "OwnerNotFoundError", str(exc), {"owner_id": exc.owner_id})


@app.exception_handler(NotFoundError)
async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    details = None
    if exc.resource_type:
        details = {"resource_type": exc.resource_type, "resource_id": exc.resource_id}
    return error_response(404, type(exc).__name__, str(exc), details)


@app.exception_handler(ServiceError)
async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    logger.error(f"Service error on {request.url.path}: {exc}")
    return error_response(500, "ServiceError", str(exc))


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes, wrong methods and explicit HTTPExceptions in ErrorDetail form."""
    return error_response(
        exc.status_code,
        HTTP_ERROR_NAMES.get(exc.status_code, "HTTPError"),
        str(exc.detail) if exc.detail else "An error occurred",
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def handle_bad_parameters(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Parameters FastAPI could not parse, such as a non-integer owner id."""
    problems = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content=ValidationErrorDetail(details=problems).model_dump())


app.include_router(portfolio_router)


@app.get("/", tags=["Health"])
def root():
    return {"name": settings.app_name, "version": app.version, "docs": "/docs"}


@app.get("/health", tags=["Health"])
def health_check(db: Session = Depends(get_db)):
    """503 when the database cannot be reached."""
    database = check_database_health(db)
    status = database["status"]
    body = {"status": status, "checks": {"database": database}}
    if status != "healthy":
        return JSONResponse(status_code=503, content=body)
    return body
