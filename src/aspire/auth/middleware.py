"""Request authentication for the GraphQL endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import Request

from ..logging import bind_user_id, get_logger
from .context import AuthContext
from .tokens import TokenService

logger = get_logger(__name__)

TOKEN_FIELD = "token"


def token_from_authorization(authorization: str | None) -> str | None:
    """
    Strip the scheme prefix from an Authorization header value.

    ``"Bearer abc"`` and ``"abc"`` both yield ``"abc"``.
    """
    if not authorization:
        return None
    parts = authorization.strip().split()
    if not parts:
        return None
    return parts[-1]


async def _token_from_body(request: Request) -> str | None:
    if request.method != "POST":
        return None
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("application/json"):
        return None
    try:
        data: Any = await request.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        token = data.get(TOKEN_FIELD)
        if isinstance(token, str) and token:
            return token
    return None


async def extract_token(request: Request) -> str | None:
    """
    Find the identity token carried by a request.

    Sources, first non-empty wins:
    1. ``token`` field of a JSON request body
    2. ``token`` query parameter
    3. ``Authorization`` header, with its scheme prefix removed
    """
    token = await _token_from_body(request)
    if token:
        return token

    token = request.query_params.get(TOKEN_FIELD)
    if token:
        return token

    return token_from_authorization(request.headers.get("authorization"))


async def get_auth_context(request: Request, token_service: TokenService) -> AuthContext:
    """
    Build the authentication context for a request.

    Verification failures do not reject the request: the context is simply
    unauthenticated and keeps the failure status so resolvers can decide.
    """
    token = await extract_token(request)
    if not token:
        return AuthContext.anonymous()

    result = token_service.verify(token)
    auth_context = AuthContext.from_result(result, token)

    if auth_context.is_authenticated and auth_context.identity is not None:
        bind_user_id(str(auth_context.identity.id))
        logger.debug(
            "Request authenticated",
            username=auth_context.identity.username,
        )
    else:
        logger.warning("Proceeding unauthenticated", verification=result.status.value)

    return auth_context
