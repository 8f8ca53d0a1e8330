"""
Shared access control logic for GraphQL resolvers
"""

from typing import TYPE_CHECKING

import strawberry

from ..auth.context import AuthContext
from ..logging import get_logger
from .errors import AuthenticationError

if TYPE_CHECKING:
    from ..auth.tokens import Identity, TokenService

logger = get_logger(__name__)


def get_auth_context_from_info(info: strawberry.Info) -> AuthContext:
    """
    Extract the auth context from a GraphQL info object.

    Falls back to an anonymous context when none was attached.
    """
    auth_context = info.context.get("auth")
    if auth_context is None:
        logger.error("Auth context not found in GraphQL context")
        return AuthContext.anonymous()
    return auth_context


def get_token_service_from_info(info: strawberry.Info) -> "TokenService":
    """Return the token service the application attached to the context."""
    token_service = info.context.get("token_service")
    if token_service is None:
        raise RuntimeError("Token service not found in GraphQL context")
    return token_service


def require_identity(
    info: strawberry.Info, message: str = "You need to be logged in!"
) -> "Identity":
    """
    Return the caller's identity or raise ``AuthenticationError``.

    Protected resolvers call this first, before opening a database session.
    """
    auth_context = get_auth_context_from_info(info)
    if not auth_context.is_authenticated or auth_context.identity is None:
        logger.info(
            "Rejected unauthenticated request",
            field=getattr(info, "field_name", None),
            verification=auth_context.token_status.value,
        )
        raise AuthenticationError(message)
    return auth_context.identity
