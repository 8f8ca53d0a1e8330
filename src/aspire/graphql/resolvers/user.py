from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import select

from ...database.connection import get_async_session
from ...dbmodels import Users
from ...logging import get_logger
from ..access_control import require_identity
from ..loaders import get_loaders, load_in_order
from ..references import to_uuids

if TYPE_CHECKING:
    from ..types.aspiration import Aspiration
    from ..types.folder import Folder
    from ..types.user import User

logger = get_logger(__name__)


def user_from_model(user: Users) -> User:
    """Convert a user row to its GraphQL type, leaving out the password hash."""
    from ..types.user import User as UserType

    return UserType(
        id=user.id,
        username=user.username,
        email=user.email,
        aspiration_ids=to_uuids(user.aspiration_ids),
        folder_ids=to_uuids(user.folder_ids),
        created_at=user.created_at,
    )


async def resolve_current_user(info: strawberry.Info) -> User | None:
    """Resolve the authenticated caller's own user record."""
    identity = require_identity(info, "Not logged in")

    async with get_async_session() as session:
        result = await session.execute(select(Users).where(Users.id == identity.id))
        user = result.scalar_one_or_none()

        if not user:
            logger.info("Authenticated user no longer exists", user_id=str(identity.id))
            return None

        return user_from_model(user)


async def resolve_users(info: strawberry.Info) -> list[User]:
    """Resolve every user, oldest first."""
    async with get_async_session() as session:
        result = await session.execute(select(Users).order_by(Users.created_at.asc()))
        return [user_from_model(user) for user in result.scalars().all()]


async def resolve_user_by_username(info: strawberry.Info, username: str) -> User | None:
    async with get_async_session() as session:
        result = await session.execute(select(Users).where(Users.username == username))
        user = result.scalar_one_or_none()
        return user_from_model(user) if user else None


# User field resolvers
async def resolve_user_aspirations(user: User, info: strawberry.Info) -> list[Aspiration]:
    from .aspiration import aspiration_from_model

    rows = await load_in_order(get_loaders(info).aspiration_loader, user.aspiration_ids)
    return [aspiration_from_model(row) for row in rows]


async def resolve_user_folders(user: User, info: strawberry.Info) -> list[Folder]:
    from .folder import folder_from_model

    rows = await load_in_order(get_loaders(info).folder_loader, user.folder_ids)
    return [folder_from_model(row) for row in rows]
