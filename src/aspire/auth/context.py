"""Authentication context for request handling."""

from __future__ import annotations

from dataclasses import dataclass

from .tokens import Identity, TokenResult, TokenStatus


@dataclass
class AuthContext:
    """Runtime authentication context for a request."""

    identity: Identity | None
    token_status: TokenStatus
    token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        """Check if the request carries a verified identity."""
        return self.identity is not None and self.token_status is TokenStatus.OK

    @classmethod
    def anonymous(cls) -> AuthContext:
        return cls(identity=None, token_status=TokenStatus.ABSENT, token=None)

    @classmethod
    def from_result(cls, result: TokenResult, token: str | None) -> AuthContext:
        return cls(identity=result.identity, token_status=result.status, token=token)
