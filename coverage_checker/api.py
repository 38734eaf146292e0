"""
HTTP service boundary.

GET /api/coverage?zip=02139 or /api/coverage?lat=42.36&lon=-71.08 returns the
coverage verdict; errors come back as {"error": "..."} with 400 for invalid
input and 502 for upstream, credential or unexpected failures. Reference
data and the API key are checked when the app is created, so a misconfigured
service never starts.

Run with:
    uvicorn --factory coverage_checker.api:create_app
"""
import uuid
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coverage_checker.data.schemas import CoverageResult, ErrorResponse
from coverage_checker.pipeline import CoveragePipeline, build_pipeline
from coverage_checker.utils.config import CheckerConfig, get_default_config
from coverage_checker.utils.exceptions import (
    ConfigurationMissing,
    InvalidInput,
    LocationNotFound,
    UpstreamUnavailable,
)
from coverage_checker.utils.logging_config import (
    bind_request_context,
    clear_request_context,
    get_logger,
)

logger = get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def create_app(
    config: Optional[CheckerConfig] = None,
    pipeline: Optional[CoveragePipeline] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Configuration (defaults plus environment if None)
        pipeline: Pre-built pipeline, mainly for tests

    Raises:
        ConfigurationMissing: No OpenCellID API key
        DataLoadError: Reference tables missing or malformed
    """
    if pipeline is None:
        pipeline = build_pipeline(config or get_default_config())

    app = FastAPI(title="LTE Coverage Checker", description="FloLive EU2/US2 LTE coverage by ZIP")
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        bind_request_context(request_id=request_id, path=request.url.path)
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["x-request-id"] = request_id
        return response

    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(request: Request, exc: InvalidInput):
        logger.info("invalid_input", field=exc.field, error=str(exc))
        return _error(400, str(exc))

    @app.exception_handler(LocationNotFound)
    async def location_not_found_handler(request: Request, exc: LocationNotFound):
        logger.info("location_not_found", query=exc.query, error=str(exc))
        return _error(502, str(exc))

    @app.exception_handler(UpstreamUnavailable)
    async def upstream_handler(request: Request, exc: UpstreamUnavailable):
        logger.warning("upstream_unavailable", service=exc.service, status=exc.status_code, error=str(exc))
        return _error(502, str(exc))

    @app.exception_handler(ConfigurationMissing)
    async def configuration_handler(request: Request, exc: ConfigurationMissing):
        logger.error("configuration_failure", setting=exc.setting, error=str(exc))
        return _error(502, "Lookup failed: upstream provider rejected the server credentials")

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error("coverage_check_crashed", error=str(exc), error_type=type(exc).__name__, exc_info=exc)
        return _error(502, "Lookup failed")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get(
        "/api/coverage",
        response_model=CoverageResult,
        responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    )
    def coverage(
        zip: Optional[str] = Query(None, description="US ZIP or ZIP+4"),
        lat: Optional[str] = Query(None, description="Latitude in decimal degrees"),
        lon: Optional[str] = Query(None, description="Longitude in decimal degrees"),
    ):
        return app.state.pipeline.run(zip_code=zip, latitude=lat, longitude=lon)

    return app
