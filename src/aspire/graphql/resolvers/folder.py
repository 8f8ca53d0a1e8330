from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy import delete, or_, select

from ...database.connection import get_async_session
from ...dbmodels import Aspirations, Folders, Users
from ...logging import get_logger
from ..access_control import require_identity
from ..loaders import get_loaders, load_in_order
from ..references import pull_ids, push_id, to_uuids
from .user import user_from_model

if TYPE_CHECKING:
    from ..mutations.root import AddFolderInput, UpdateFolderInput
    from ..types.aspiration import Aspiration
    from ..types.folder import Folder
    from ..types.user import User

logger = get_logger(__name__)


def folder_from_model(folder: Folders) -> Folder:
    from ..types.folder import Folder as FolderType

    return FolderType(
        id=folder.id,
        username=folder.username,
        title=folder.title,
        description=folder.description,
        aspiration_ids=to_uuids(folder.aspiration_ids),
        created_at=folder.created_at,
        updated_at=folder.updated_at,
    )


# Query resolvers
async def resolve_folders(info: strawberry.Info, username: str | None = None) -> list[Folder]:
    """
    Resolve folders, newest first.

    When ``username`` is given only that user's folders are returned.
    """
    async with get_async_session() as session:
        stmt = select(Folders)
        if username:
            stmt = stmt.where(Folders.username == username)
        stmt = stmt.order_by(Folders.created_at.desc())

        result = await session.execute(stmt)
        return [folder_from_model(folder) for folder in result.scalars().all()]


async def resolve_folder_by_id(info: strawberry.Info, id: UUID) -> Folder | None:
    async with get_async_session() as session:
        result = await session.execute(select(Folders).where(Folders.id == id))
        folder = result.scalar_one_or_none()

        if not folder:
            logger.info("Folder not found", folder_id=str(id))
            return None

        return folder_from_model(folder)


# Folder field resolvers
async def resolve_folder_aspirations(folder: Folder, info: strawberry.Info) -> list[Aspiration]:
    from .aspiration import aspiration_from_model

    rows = await load_in_order(get_loaders(info).aspiration_loader, folder.aspiration_ids)
    return [aspiration_from_model(row) for row in rows]


# Mutation resolvers
async def add_folder(info: strawberry.Info, input: AddFolderInput) -> Folder:
    """
    Create a folder owned by the caller.

    The new folder id is appended to the caller's folder list in the same
    transaction.
    """
    identity = require_identity(info)

    async with get_async_session() as session:
        folder = Folders(
            username=identity.username,
            title=input.title,
            description=input.description,
            aspiration_ids=[],
        )
        session.add(folder)
        await session.flush()

        stmt = select(Users).where(Users.id == identity.id).with_for_update()
        user = (await session.execute(stmt)).scalar_one_or_none()
        if user:
            user.folder_ids = push_id(user.folder_ids, folder.id)
        else:
            logger.warning("Folder owner not found", user_id=str(identity.id))

        await session.flush()

        logger.info(
            "Folder created",
            folder_id=str(folder.id),
            user_id=str(identity.id),
            title=folder.title,
        )

        get_loaders(info).clear()
        return folder_from_model(folder)


async def remove_folder(info: strawberry.Info, folder_id: UUID) -> User | None:
    """
    Delete a folder and every aspiration inside it.

    The folder id and the ids of its aspirations are pulled from the lists
    of every user holding them. Removing an unknown folder is a no-op.
    """
    identity = require_identity(info)

    async with get_async_session() as session:
        contained_stmt = select(Aspirations.id, Aspirations.username).where(
            Aspirations.folder_id == folder_id
        )
        contained = (await session.execute(contained_stmt)).all()
        owner_stmt = select(Folders.username).where(Folders.id == folder_id)
        folder_owner = (await session.execute(owner_stmt)).scalar_one_or_none()

        # Lists to clean: the caller, the folder owner and every aspiration owner
        usernames = {username for _, username in contained}
        if folder_owner is not None:
            usernames.add(folder_owner)
        users_stmt = (
            select(Users)
            .where(or_(Users.id == identity.id, Users.username.in_(sorted(usernames))))
            .order_by(Users.id)
            .with_for_update()
        )
        users = (await session.execute(users_stmt)).scalars().all()
        user = next((u for u in users if u.id == identity.id), None)

        folder_stmt = select(Folders).where(Folders.id == folder_id).with_for_update()
        folder = (await session.execute(folder_stmt)).scalar_one_or_none()

        contained_ids = [aspiration_id for aspiration_id, _ in contained]
        if folder:
            contained_ids.extend(to_uuids(folder.aspiration_ids))

        for holder in users:
            holder.folder_ids = pull_ids(holder.folder_ids, folder_id)
            holder.aspiration_ids = pull_ids(holder.aspiration_ids, *contained_ids)

        await session.execute(delete(Aspirations).where(Aspirations.folder_id == folder_id))
        if folder:
            await session.delete(folder)

        await session.flush()

        logger.info(
            "Folder removed",
            folder_id=str(folder_id),
            user_id=str(identity.id),
            found=folder is not None,
            aspirations_removed=len(set(contained_ids)),
        )

        get_loaders(info).clear()
        return user_from_model(user) if user else None


async def update_folder(info: strawberry.Info, input: UpdateFolderInput) -> Folder | None:
    """
    Overwrite the provided fields of a folder and return the updated folder.

    Returns None when the folder does not exist.
    """
    identity = require_identity(info)

    async with get_async_session() as session:
        result = await session.execute(select(Folders).where(Folders.id == input.folder_id))
        folder = result.scalar_one_or_none()

        if not folder:
            logger.info("Folder not found for update", folder_id=str(input.folder_id))
            return None

        if input.title is not None:
            folder.title = input.title
        if input.description is not None:
            folder.description = input.description

        await session.flush()
        await session.refresh(folder)

        logger.info(
            "Folder updated",
            folder_id=str(folder.id),
            user_id=str(identity.id),
            updated_fields=[
                k
                for k, v in {"title": input.title, "description": input.description}.items()
                if v is not None
            ],
        )

        get_loaders(info).clear()
        return folder_from_model(folder)
