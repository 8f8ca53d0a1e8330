"""
Per-request logging for the Aspire API.
"""

import json
import re
import time
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import REDACTED, clear_request_context, get_logger, redact, set_request_context

logger = get_logger(__name__)

GRAPHQL_PATH = "/graphql"

# GraphQL documents and variables may embed passwords, so never log them raw
GRAPHQL_PAYLOAD_PARAMS = ("query", "variables", "extensions")

_OPERATION_PATTERN = re.compile(r"\b(query|mutation)\s+(\w+)")


def sanitize_query_params(params: dict[str, Any]) -> dict[str, Any]:
    """Mask credential-like query parameters before they are logged."""
    return redact(params)


def operation_name_from_document(query: Any) -> str | None:
    """Label a raw GraphQL document by its first named operation.

    Mutations are prefixed with ``mutation:``. Introspection and anonymous
    documents get fixed labels.
    """
    if not isinstance(query, str) or not query:
        return None
    if "__schema" in query or "IntrospectionQuery" in query:
        return "__introspection"
    match = _OPERATION_PATTERN.search(query)
    if not match:
        return "unnamed_operation"
    kind, name = match.groups()
    return f"mutation:{name}" if kind == "mutation" else name


def _operation_from_payload(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None
    name = payload.get("operationName")
    if isinstance(name, str) and name:
        return name
    return operation_name_from_document(payload.get("query"))


async def extract_graphql_operation_name(request: Request) -> str | None:
    """Operation name of a GraphQL GET or POST request, or None."""
    if request.url.path != GRAPHQL_PATH:
        return None

    if request.method == "GET":
        return _operation_from_payload(dict(request.query_params))

    if request.method == "POST":
        body = await request.body()
        if not body:
            return None
        try:
            return _operation_from_payload(json.loads(body))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None

    return None


def _loggable_params(request: Request) -> dict[str, Any] | None:
    if not request.query_params:
        return None
    params = sanitize_query_params(dict(request.query_params))
    if request.url.path == GRAPHQL_PATH:
        params.update({key: REDACTED for key in GRAPHQL_PAYLOAD_PARAMS if key in params})
    return params


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Give each request a ``request_id`` and log its start, end and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        set_request_context(request.headers.get("x-request-id"))
        started = time.perf_counter()
        operation = await extract_graphql_operation_name(request)

        try:
            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                query_params=_loggable_params(request),
                graphql_operation=operation,
                remote_addr=request.client.host if request.client else None,
            )

            response = await call_next(request)

            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                graphql_operation=operation,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return response

        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                graphql_operation=operation,
                error=str(e),
            )
            raise

        finally:
            clear_request_context()
