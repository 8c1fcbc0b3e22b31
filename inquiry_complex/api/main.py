"""FastAPI application setup for the inquiry complex API."""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging
import os
import time

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from .middleware import setup_middleware
from .models import ErrorResponse
from .routes import complexes
from ..exceptions import (
    InquiryComplexError,
    NotFoundError,
    ValidationError,
    ExpansionError,
    GenerationError,
)
from ..graph.registry import ComplexRegistry
from ..reasoning.analyzer import ComplexAnalyzer
from ..reasoning.expansion import ExpansionOrchestrator
from ..reasoning.llm import ContentGenerator
from ..reasoning.llm_factory import auto_expand_delay, create_llm
from ..reasoning.planner import AutoExpander
from ..storage.json_store import JsonComplexStore

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

API_TITLE = "Inquiry Complex API"
API_VERSION = "0.1.0"

# Domain errors and the status codes they map to; first match wins
ERROR_STATUS = (
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_operation"),
    (ExpansionError, status.HTTP_409_CONFLICT, "expansion_conflict"),
    (GenerationError, status.HTTP_502_BAD_GATEWAY, "generation_failed"),
)


def _error_response(
    request: Request,
    status_code: int,
    detail: str,
    error_code: str,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            detail=detail,
            error_code=error_code,
            path=request.url.path,
            timestamp=datetime.now(timezone.utc),
        ).model_dump(mode="json"),
        headers=headers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Record start time and release the generator on shutdown."""
    app.state.start_time = time.time()
    logger.info("API starting up")
    yield
    logger.info("API shutting down")
    close = getattr(app.state.generator, "close", None)
    if close is not None:
        await close()


def create_app(
    registry: Optional[ComplexRegistry] = None,
    generator: Optional[ContentGenerator] = None,
    pacing_delay: Optional[float] = None,
    store: Optional[JsonComplexStore] = None
) -> FastAPI:
    """Create the API application.

    Args:
        registry: Registry of active complexes (a fresh one when omitted)
        generator: Content generator (built from the environment when omitted)
        pacing_delay: Seconds between auto-expansion steps
            (defaults to INQUIRY_AUTO_EXPAND_DELAY)
        store: Persistent store (defaults to INQUIRY_STORE_DIR when set)

    Returns:
        FastAPI: Configured application
    """
    app = FastAPI(
        title=API_TITLE,
        description="API for building and exploring inquiry complexes",
        version=API_VERSION,
        lifespan=lifespan,
    )

    if registry is None:
        registry = ComplexRegistry()
    if generator is None:
        generator = create_llm()
    if pacing_delay is None:
        pacing_delay = auto_expand_delay()
    if store is None and os.environ.get("INQUIRY_STORE_DIR"):
        store = JsonComplexStore(os.environ["INQUIRY_STORE_DIR"])

    orchestrator = ExpansionOrchestrator(registry, generator)
    app.state.registry = registry
    app.state.generator = generator
    app.state.orchestrator = orchestrator
    app.state.auto_expander = AutoExpander(orchestrator, pacing_delay=pacing_delay)
    app.state.analyzer = ComplexAnalyzer(registry, generator)
    app.state.store = store

    setup_middleware(app)

    @app.exception_handler(InquiryComplexError)
    async def domain_exception_handler(request: Request, exc: InquiryComplexError):
        """Map domain errors to status codes."""
        for error_type, status_code, error_code in ERROR_STATUS:
            if isinstance(exc, error_type):
                logger.warning(f"{error_code} on {request.url.path}: {exc}")
                return _error_response(request, status_code, str(exc), error_code)
        logger.error(f"Unmapped domain error on {request.url.path}: {exc}")
        return _error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            str(exc),
            "internal_server_error",
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Handle generic exceptions."""
        logger.exception(f"Unhandled exception: {exc}")
        return _error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            f"An unexpected error occurred: {str(exc)}",
            "internal_server_error",
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions."""
        return _error_response(
            request,
            exc.status_code,
            str(exc.detail),
            f"http_{exc.status_code}",
            headers=exc.headers,
        )

    app.include_router(complexes.router)

    @app.get(
        "/",
        summary="API root",
        description="Get API information",
    )
    async def root() -> Dict[str, Any]:
        """Get API information."""
        return {
            "name": API_TITLE,
            "version": API_VERSION,
            "documentation": "/docs",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get(
        "/health",
        summary="Health check",
        description="Check if the API is healthy",
    )
    async def health_check() -> Dict[str, Any]:
        """Check if the API is healthy."""
        start_time = getattr(app.state, "start_time", None)
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "complexes": len(app.state.registry),
            "uptime": time.time() - start_time if start_time else 0,
        }

    return app


app = create_app()
