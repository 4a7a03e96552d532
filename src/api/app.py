# This file builds the FastAPI application and registers all API routers.
# It exists so startup behavior, middleware, and error handling are configured in one place.
# The app adds request IDs, timing headers, HTTP metrics, and request logging for operations visibility.
# Keeping bootstrap logic centralized makes deployment and testing more predictable.

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from pymongo.errors import PyMongoError
from starlette.middleware.base import RequestResponseEndpoint

from src.api.api_config import get_api_config
from src.api.dependencies import get_config, get_database_client
from src.api.error_handlers import register_error_handlers
from src.api.openapi_docs import OPENAPI_TAGS
from src.api.routers.health import router as health_router
from src.api.routers.products import router as products_router
from src.api.routers.users import router as users_router
from src.common.logging import configure_logging

logger = logging.getLogger("src.api.http")

API_HTTP_REQUESTS_TOTAL = Counter(
    "api_http_requests_total",
    "Total number of HTTP requests processed by the API.",
    ["method", "path", "status_code"],
)
API_HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "api_http_request_duration_seconds",
    "API request duration in seconds.",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)
API_HTTP_INFLIGHT_REQUESTS = Gauge(
    "api_http_inflight_requests",
    "Number of API requests currently being processed.",
    ["method", "path"],
)


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def _log_http_response(method: str, path: str, status_code: int, duration_ms: float) -> None:
    message = "%s %s - Status: %s - Duration: %.2fms"
    if status_code >= 500:
        logger.error(message, method, path, status_code, duration_ms)
    elif status_code >= 400:
        logger.warning(message, method, path, status_code, duration_ms)
    else:
        logger.info(message, method, path, status_code, duration_ms)


def create_app() -> FastAPI:
    """Create configured FastAPI application instance."""

    configure_logging()
    config = get_api_config()

    app = FastAPI(
        title=config.api_name,
        description=(
            "REST API managing users and the products they own. "
            "Identifiers are 24-character hex strings; JSON fields use camelCase."
        ),
        version=config.app_version,
        docs_url=config.docs_path,
        openapi_tags=OPENAPI_TAGS,
    )

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        method_label = request.method
        path_label = request.url.path
        started = time.perf_counter()
        status_code = 500
        API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label, path=path_label).inc()
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            duration_ms = (time.perf_counter() - started) * 1000.0

            response.headers["x-request-id"] = request_id
            response.headers["x-response-time-ms"] = f"{duration_ms:.2f}"

            if config.enable_request_logging:
                _log_http_response(method_label, request.url.path, status_code, duration_ms)

            return response
        finally:
            duration_s = time.perf_counter() - started
            route_label = _route_label(request)
            API_HTTP_REQUESTS_TOTAL.labels(
                method=method_label,
                path=route_label,
                status_code=str(status_code),
            ).inc()
            API_HTTP_REQUEST_DURATION_SECONDS.labels(
                method=method_label,
                path=route_label,
            ).observe(duration_s)
            API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label, path=path_label).dec()

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.on_event("startup")
    def startup_indexes() -> None:
        resolve_db = app.dependency_overrides.get(get_database_client, get_database_client)
        resolve_config = app.dependency_overrides.get(get_config, get_config)
        active_config = resolve_config()
        try:
            resolve_db().ensure_indexes(
                users_collection=active_config.users_collection_name,
                products_collection=active_config.products_collection_name,
            )
            app.state.indexes_ready = True
        except PyMongoError as exc:
            logger.warning("Could not ensure indexes at startup: %s", exc)
            app.state.indexes_ready = False

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(products_router)

    return app


app = create_app()
