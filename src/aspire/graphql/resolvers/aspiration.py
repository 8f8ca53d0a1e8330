from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy import or_, select

from ...database.connection import get_async_session
from ...dbmodels import Aspirations, Folders, Users
from ...logging import get_logger
from ..access_control import require_identity
from ..errors import NotFoundError
from ..loaders import get_loaders
from ..references import pull_ids, push_id
from .user import user_from_model

if TYPE_CHECKING:
    from ..mutations.root import AddAspirationInput, UpdateAspirationInput
    from ..types.aspiration import Aspiration
    from ..types.folder import Folder
    from ..types.user import User

logger = get_logger(__name__)


def aspiration_from_model(aspiration: Aspirations) -> Aspiration:
    from ..types.aspiration import Aspiration as AspirationType

    return AspirationType(
        id=aspiration.id,
        username=aspiration.username,
        title=aspiration.title,
        description=aspiration.description,
        folder_id=aspiration.folder_id,
        created_at=aspiration.created_at,
        updated_at=aspiration.updated_at,
    )


# Query resolvers
async def resolve_aspirations(
    info: strawberry.Info, username: str | None = None
) -> list[Aspiration]:
    """
    Resolve aspirations, newest first.

    When ``username`` is given only that user's aspirations are returned.
    """
    async with get_async_session() as session:
        stmt = select(Aspirations)
        if username:
            stmt = stmt.where(Aspirations.username == username)
        stmt = stmt.order_by(Aspirations.created_at.desc())

        result = await session.execute(stmt)
        return [aspiration_from_model(aspiration) for aspiration in result.scalars().all()]


async def resolve_aspiration_by_id(info: strawberry.Info, id: UUID) -> Aspiration | None:
    async with get_async_session() as session:
        result = await session.execute(select(Aspirations).where(Aspirations.id == id))
        aspiration = result.scalar_one_or_none()

        if not aspiration:
            logger.info("Aspiration not found", aspiration_id=str(id))
            return None

        return aspiration_from_model(aspiration)


# Aspiration field resolvers
async def resolve_aspiration_folder(aspiration: Aspiration, info: strawberry.Info) -> Folder | None:
    from .folder import folder_from_model

    folder = await get_loaders(info).folder_loader.load(aspiration.folder_id)
    return folder_from_model(folder) if folder else None


# Mutation resolvers
async def add_aspiration(info: strawberry.Info, input: AddAspirationInput) -> Aspiration:
    """
    Create an aspiration in an existing folder.

    The new id is appended to both the caller's and the folder's aspiration
    lists in the same transaction. Fails with ``NotFoundError`` when the
    folder does not exist.
    """
    identity = require_identity(info)

    async with get_async_session() as session:
        user_stmt = select(Users).where(Users.id == identity.id).with_for_update()
        user = (await session.execute(user_stmt)).scalar_one_or_none()

        folder_stmt = select(Folders).where(Folders.id == input.folder_id).with_for_update()
        folder = (await session.execute(folder_stmt)).scalar_one_or_none()

        if not folder:
            logger.info("Folder not found for new aspiration", folder_id=str(input.folder_id))
            raise NotFoundError("Folder not found")

        aspiration = Aspirations(
            username=identity.username,
            title=input.title,
            description=input.description,
            folder_id=folder.id,
        )
        session.add(aspiration)
        await session.flush()

        if user:
            user.aspiration_ids = push_id(user.aspiration_ids, aspiration.id)
        else:
            logger.warning("Aspiration owner not found", user_id=str(identity.id))
        folder.aspiration_ids = push_id(folder.aspiration_ids, aspiration.id)

        await session.flush()

        logger.info(
            "Aspiration created",
            aspiration_id=str(aspiration.id),
            folder_id=str(folder.id),
            user_id=str(identity.id),
        )

        get_loaders(info).clear()
        return aspiration_from_model(aspiration)


async def remove_aspiration(
    info: strawberry.Info, aspiration_id: UUID, folder_id: UUID
) -> User | None:
    """
    Delete an aspiration and pull its id from the user and folder lists holding it.

    The folder the aspiration is recorded under is cleaned too, in case it
    differs from ``folder_id``. Calling this again for the same id is a no-op.
    """
    identity = require_identity(info)

    async with get_async_session() as session:
        aspiration_stmt = select(Aspirations).where(Aspirations.id == aspiration_id)
        aspiration = (await session.execute(aspiration_stmt)).scalar_one_or_none()

        # The owner may be someone other than the caller
        users_filter = Users.id == identity.id
        if aspiration:
            users_filter = or_(users_filter, Users.username == aspiration.username)
        users_stmt = select(Users).where(users_filter).order_by(Users.id).with_for_update()
        users = (await session.execute(users_stmt)).scalars().all()
        user = next((u for u in users if u.id == identity.id), None)

        folder_ids = {folder_id}
        if aspiration:
            folder_ids.add(aspiration.folder_id)

        folders_stmt = select(Folders).where(Folders.id.in_(folder_ids)).with_for_update()
        folders = (await session.execute(folders_stmt)).scalars().all()

        for holder in users:
            holder.aspiration_ids = pull_ids(holder.aspiration_ids, aspiration_id)
        for folder in folders:
            folder.aspiration_ids = pull_ids(folder.aspiration_ids, aspiration_id)

        if aspiration:
            await session.delete(aspiration)

        await session.flush()

        logger.info(
            "Aspiration removed",
            aspiration_id=str(aspiration_id),
            user_id=str(identity.id),
            found=aspiration is not None,
        )

        get_loaders(info).clear()
        return user_from_model(user) if user else None


async def update_aspiration(
    info: strawberry.Info, input: UpdateAspirationInput
) -> Aspiration | None:
    """
    Overwrite the provided fields of an aspiration and return the updated record.

    The owner and folder are left unchanged. Returns None when the
    aspiration does not exist.
    """
    identity = require_identity(info)

    async with get_async_session() as session:
        stmt = select(Aspirations).where(Aspirations.id == input.aspiration_id)
        aspiration = (await session.execute(stmt)).scalar_one_or_none()

        if not aspiration:
            logger.info(
                "Aspiration not found for update", aspiration_id=str(input.aspiration_id)
            )
            return None

        if input.title is not None:
            aspiration.title = input.title
        if input.description is not None:
            aspiration.description = input.description

        await session.flush()
        await session.refresh(aspiration)

        logger.info(
            "Aspiration updated",
            aspiration_id=str(aspiration.id),
            user_id=str(identity.id),
            updated_fields=[
                k
                for k, v in {"title": input.title, "description": input.description}.items()
                if v is not None
            ],
        )

        get_loaders(info).clear()
        return aspiration_from_model(aspiration)
