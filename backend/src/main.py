"""TradeMatch Backend - FastAPI application

Wires the match API, observability endpoints, request correlation
middleware and the error responses for matching failures.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from config import get_settings
from observability.logging_config import configure_logging
from observability.middleware import RequestIDMiddleware, REQUEST_ID_HEADER
from observability.router import router as observability_router
from matching.ports import StoreUnavailableError
from matching.router import router as matching_router
from matching.status import StateTransitionError

API_VERSION = "0.1.0"

settings = get_settings()

configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"TradeMatch API {API_VERSION} starting ({settings.ENVIRONMENT})")
    yield
    logger.info("TradeMatch API stopped")


def error_response(status_code: int, error: str, message: str, **extra: Any) -> JSONResponse:
    """Uniform error body: {"error": code, "message": text, ...}."""
    return JSONResponse(status_code=status_code, content={"error": error, "message": message, **extra})


def create_app() -> FastAPI:
    """Build the application with middleware, handlers and routers."""
    expose_docs = settings.ENVIRONMENT != "production"
    application = FastAPI(
        title="TradeMatch API",
        description="B2B trade marketplace: buy request and listing matching",
        version=API_VERSION,
        docs_url="/docs" if expose_docs else None,
        redoc_url=None,
        openapi_url="/openapi.json" if expose_docs else None,
        lifespan=lifespan,
    )

    application.add_middleware(RequestIDMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    @application.exception_handler(RequestValidationError)
    async def on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning(f"Validation error on {request.method} {request.url.path}")
        return error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "validation_error",
            "Request validation failed",
            details=exc.errors(),
        )

    @application.exception_handler(StateTransitionError)
    async def on_state_transition(request: Request, exc: StateTransitionError) -> JSONResponse:
        return error_response(status.HTTP_409_CONFLICT, "invalid_transition", str(exc))

    @application.exception_handler(StoreUnavailableError)
    async def on_store_unavailable(request: Request, exc: StoreUnavailableError) -> JSONResponse:
        logger.error(f"Store unavailable on {request.method} {request.url.path}: {exc}")
        return error_response(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "store_unavailable",
            "Matching is temporarily unavailable. Please try again later.",
        )

    @application.exception_handler(SQLAlchemyError)
    async def on_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "database_error",
            "A database error occurred. Please try again later.",
        )

    application.include_router(observability_router)
    application.include_router(matching_router)

    @application.get("/", include_in_schema=False)
    async def root() -> dict[str, Any]:
        return {"name": "TradeMatch API", "version": API_VERSION, "status": "running"}

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
