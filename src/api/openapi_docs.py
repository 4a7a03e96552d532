# This file builds OpenAPI metadata shared by the resource routers.
# It exists so error responses are documented from the ErrorResponse model instead of per-route examples.
# Descriptions are parameterized by resource name, which keeps users and products documented alike.

from __future__ import annotations

from typing import Any

from src.api.schemas.common import ErrorResponse

OPENAPI_TAGS: list[dict[str, str]] = [
    {"name": "health", "description": "Service liveness, readiness, and version metadata."},
    {"name": "users", "description": "Create, query, update, and delete users."},
    {
        "name": "products",
        "description": "Create, query, update, and delete products owned by users.",
    },
    {
        "name": "maintenance",
        "description": "Diagnostics and one-off repair of legacy product owner data.",
    },
]

_ERROR_DESCRIPTIONS: dict[int, str] = {
    400: "Bad Request - invalid {resource} payload or identifier.",
    404: "Not Found - {resource} does not exist.",
    409: "Conflict - {resource} violates a uniqueness rule.",
    500: "Internal Server Error.",
}


def error_responses(resource: str, *status_codes: int) -> dict[int | str, dict[str, Any]]:
    """Build a FastAPI `responses=` mapping for the given error status codes."""

    return {
        code: {
            "model": ErrorResponse,
            "description": _ERROR_DESCRIPTIONS.get(code, "Error.").format(resource=resource),
        }
        for code in status_codes
    }
