import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.db.connection import create_tables, dispose_engine, get_engine
from backend.settings import get_settings

from .api import fighters
from .schemas.error import ErrorResponse, ErrorType
from .utils.error_responses import (
    build_error_response,
    build_validation_error_response,
)
from .utils.request_context import (
    REQUEST_ID_HEADER,
    get_request_id,
    new_request_id,
    request_id_scope,
)

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level_numeric,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _sanitize_database_url(url: str) -> str:
    """Sanitize database URL to hide password in logs."""
    if "://" not in url:
        return url

    scheme, rest = url.split("://", 1)
    if "@" in rest:
        auth, host_db = rest.split("@", 1)
        if ":" in auth:
            user, _ = auth.split(":", 1)
            return f"{scheme}://{user}:***@{host_db}"
        return f"{scheme}://{auth}@{host_db}"
    return url


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    logger.info("Database Type: %s", settings.database_type.upper())
    logger.info("Database URL: %s", _sanitize_database_url(settings.resolved_database_url))
    await create_tables(get_engine())

    yield

    logger.info("Shutting down fighter data API")
    await dispose_engine()


app = FastAPI(
    title="MMA Fighter Data API",
    version="0.1.0",
    description="REST API over enriched MMA fighter records.",
    lifespan=lifespan,
    redirect_slashes=False,
)


def _default_origins() -> list[str]:
    ports = list(range(3000, 3011)) + [8081, 19006]
    origins = []
    for host in ("localhost", "127.0.0.1"):
        origins.extend([f"http://{host}:{port}" for port in ports])
    return origins


def _combine_origins(*origin_groups: list[str]) -> list[str]:
    """Merge origins preserving order and removing duplicates."""
    seen: set[str] = set()
    combined: list[str] = []
    for group in origin_groups:
        for origin in group:
            normalized = origin.rstrip("/")
            if normalized and normalized not in seen:
                seen.add(normalized)
                combined.append(normalized)
    return combined


allow_origins = _combine_origins(_default_origins(), settings.cors_allow_origins)
logger.debug("Configured CORS allow_origins: %s", ", ".join(allow_origins))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Tag the request and its response with a request ID."""
    request_id = new_request_id(request.headers.get(REQUEST_ID_HEADER))
    with request_id_scope(request_id):
        response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def _error_json(error: ErrorResponse, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=error.model_dump(mode="json"),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    error = build_validation_error_response(exc.errors(), path=request.url.path)
    logger.warning(
        "Validation error for request %s to %s: %s",
        error.request_id,
        request.url.path,
        error.detail,
    )
    return _error_json(error)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Wrap ``HTTPException`` details in the standard error envelope."""
    error_type = (
        ErrorType.NOT_FOUND
        if exc.status_code == status.HTTP_404_NOT_FOUND
        else ErrorType.INTERNAL_ERROR
    )
    error = build_error_response(
        error_type,
        str(exc.detail),
        status_code=exc.status_code,
        path=request.url.path,
    )
    return _error_json(error, headers=getattr(exc, "headers", None))


@app.exception_handler(IntegrityError)
async def database_integrity_exception_handler(request: Request, exc: IntegrityError):
    logger.error(
        "Integrity error for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        exc,
    )
    error = build_error_response(
        ErrorType.DATABASE_ERROR,
        "Data integrity constraint violation",
        detail="The operation would violate a database constraint.",
        status_code=status.HTTP_409_CONFLICT,
        path=request.url.path,
    )
    return _error_json(error)


@app.exception_handler(OperationalError)
@app.exception_handler(DBAPIError)
async def database_connection_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Database error for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        exc,
    )
    error = build_error_response(
        ErrorType.DATABASE_ERROR,
        "Database connection failed",
        detail="Unable to reach the record store. Please try again later.",
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        path=request.url.path,
    )
    return _error_json(error)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled %s for %s %s",
        type(exc).__name__,
        request.method,
        request.url.path,
    )
    error = build_error_response(
        ErrorType.INTERNAL_ERROR,
        "Internal server error",
        detail=f"An unexpected error occurred: {type(exc).__name__}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        path=request.url.path,
    )
    return _error_json(error)


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    """Simple health endpoint for readiness checks."""
    return {"status": "ok"}


app.include_router(fighters.router, prefix="/api/fighters", tags=["fighters"])
