"""Signed identity tokens for self-issued authentication."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from uuid import UUID

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from ..logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """The authenticated user's identity carried inside a token."""

    id: UUID
    username: str
    email: str


class TokenStatus(Enum):
    """Outcome of verifying a token."""

    OK = "ok"
    EXPIRED = "expired"
    INVALID = "invalid"
    ABSENT = "absent"


@dataclass(frozen=True)
class TokenResult:
    """Tagged verification result; ``identity`` is only set when status is OK."""

    status: TokenStatus
    identity: Identity | None = None

    @property
    def ok(self) -> bool:
        return self.status is TokenStatus.OK

    @classmethod
    def absent(cls) -> TokenResult:
        return cls(TokenStatus.ABSENT)


class TokenService:
    """Issues and verifies HMAC-signed JWTs embedding an :class:`Identity`."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "aspire",
        audience: str = "aspire-api",
        token_expiry_hours: int = 2,
    ):
        if not secret_key:
            raise ValueError("A signing secret is required")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.token_expiry_hours = token_expiry_hours

    @property
    def expires_in(self) -> timedelta:
        return timedelta(hours=self.token_expiry_hours)

    def issue(self, identity: Identity, now: datetime | None = None) -> str:
        """Issue a token for ``identity`` that expires ``token_expiry_hours`` after ``now``."""
        now = now or datetime.now(UTC)

        payload = {
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "nbf": now,
            "exp": now + self.expires_in,
            "sub": str(identity.id),
            "username": identity.username,
            "email": identity.email,
        }

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str | None) -> TokenResult:
        """
        Verify a token and return a tagged result.

        Never raises: an empty token is ``ABSENT``, an expired signature is
        ``EXPIRED`` and every other decoding or claim problem is ``INVALID``.
        """
        if not token:
            return TokenResult.absent()

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={
                    "require": ["exp", "sub"],
                    "verify_exp": True,
                    "verify_nbf": True,
                    "verify_iat": True,
                },
            )
        except ExpiredSignatureError:
            logger.warning("Token verification failed", status=TokenStatus.EXPIRED.value)
            return TokenResult(TokenStatus.EXPIRED)
        except InvalidTokenError as e:
            logger.warning(
                "Token verification failed", status=TokenStatus.INVALID.value, error=str(e)
            )
            return TokenResult(TokenStatus.INVALID)

        username = payload.get("username")
        email = payload.get("email")
        try:
            user_id = UUID(str(payload["sub"]))
        except ValueError:
            user_id = None

        if user_id is None or not isinstance(username, str) or not isinstance(email, str):
            logger.warning(
                "Token verification failed",
                status=TokenStatus.INVALID.value,
                error="Missing identity claims",
            )
            return TokenResult(TokenStatus.INVALID)

        return TokenResult(
            TokenStatus.OK,
            Identity(id=user_id, username=username, email=email),
        )
