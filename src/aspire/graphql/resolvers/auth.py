from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError

from ...auth.passwords import MAX_PASSWORD_BYTES
from ...auth.tokens import Identity
from ...database.connection import get_async_session
from ...dbmodels import Users
from ...logging import get_logger
from ..access_control import get_token_service_from_info
from ..errors import AuthenticationError, InvalidInputError
from .user import user_from_model

if TYPE_CHECKING:
    from ..types.user import AuthPayload

logger = get_logger(__name__)

INCORRECT_CREDENTIALS = "Incorrect credentials"


def _validate_sign_up(username: str, email: str, password: str) -> None:
    if not username.strip():
        raise InvalidInputError("Username is required")
    if not email.strip() or "@" not in email:
        raise InvalidInputError("A valid email address is required")
    if not password:
        raise InvalidInputError("Password is required")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise InvalidInputError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def _auth_payload(info: strawberry.Info, user: Users) -> AuthPayload:
    from ..types.user import AuthPayload as AuthPayloadType

    token_service = get_token_service_from_info(info)
    token = token_service.issue(Identity(id=user.id, username=user.username, email=user.email))
    return AuthPayloadType(token=token, user=user_from_model(user))


async def sign_up(info: strawberry.Info, username: str, email: str, password: str) -> AuthPayload:
    """
    Create a user account and return a token for it.

    Username and email must both be unused.
    """
    username = username.strip()
    email = email.strip()
    _validate_sign_up(username, email, password)

    async with get_async_session() as session:
        stmt = select(Users).where(or_(Users.username == username, Users.email == email))
        existing = (await session.execute(stmt)).scalars().first()
        if existing:
            field = "Username" if existing.username == username else "Email"
            raise InvalidInputError(f"{field} is already in use")

        user = Users(username=username, email=email, aspiration_ids=[], folder_ids=[])
        user.set_password(password)

        session.add(user)
        try:
            await session.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent sign-up for the same name or email
            logger.info("Sign-up conflicted on insert", username=username)
            raise InvalidInputError("Username or email is already in use") from e

        logger.info("User signed up", user_id=str(user.id), username=user.username)

        return _auth_payload(info, user)


async def login(info: strawberry.Info, email: str, password: str) -> AuthPayload:
    """
    Exchange an email and password for a token.

    Unknown emails and wrong passwords fail with the same error.
    """
    async with get_async_session() as session:
        result = await session.execute(select(Users).where(Users.email == email.strip()))
        user = result.scalar_one_or_none()

        if not user or not user.is_correct_password(password):
            logger.info("Login failed", reason="unknown email" if not user else "bad password")
            raise AuthenticationError(INCORRECT_CREDENTIALS)

        logger.info("User logged in", user_id=str(user.id))

        return _auth_payload(info, user)
