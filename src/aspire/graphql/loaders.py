from collections.abc import Sequence
from uuid import UUID

import strawberry
from sqlalchemy import select
from strawberry.dataloader import DataLoader

from ..database.connection import get_async_session
from ..dbmodels import Aspirations, Folders


async def load_aspirations(keys: list[UUID]) -> list[Aspirations | None]:
    """Batch load aspirations by ID."""
    async with get_async_session() as session:
        stmt = select(Aspirations).where(Aspirations.id.in_(keys))
        result = await session.execute(stmt)
        aspirations_map = {aspiration.id: aspiration for aspiration in result.scalars().all()}
        return [aspirations_map.get(key) for key in keys]


async def load_folders(keys: list[UUID]) -> list[Folders | None]:
    """Batch load folders by ID."""
    async with get_async_session() as session:
        stmt = select(Folders).where(Folders.id.in_(keys))
        result = await session.execute(stmt)
        folders_map = {folder.id: folder for folder in result.scalars().all()}
        return [folders_map.get(key) for key in keys]


class Loaders:
    def __init__(self):
        self.aspiration_loader = DataLoader(load_fn=load_aspirations)
        self.folder_loader = DataLoader(load_fn=load_folders)

    def clear(self) -> None:
        """Drop cached rows after a mutation changed them."""
        self.aspiration_loader.clear_all()
        self.folder_loader.clear_all()


def get_loaders(info: strawberry.Info) -> Loaders:
    """Return the request's loaders, creating them on first use."""
    loaders = info.context.get("loaders")
    if loaders is None:
        loaders = Loaders()
        info.context["loaders"] = loaders
    return loaders


async def load_in_order(loader: DataLoader, ids: Sequence[UUID]) -> list:
    """Load ``ids`` through ``loader`` keeping list order and skipping missing rows."""
    if not ids:
        return []
    rows = await loader.load_many(list(ids))
    return [row for row in rows if row is not None]
