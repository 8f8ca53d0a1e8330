"""Authentication for the Aspire API: tokens, passwords and request context."""

from .context import AuthContext
from .middleware import extract_token, get_auth_context
from .tokens import Identity, TokenResult, TokenService, TokenStatus

__all__ = [
    "AuthContext",
    "Identity",
    "TokenResult",
    "TokenService",
    "TokenStatus",
    "extract_token",
    "get_auth_context",
]
