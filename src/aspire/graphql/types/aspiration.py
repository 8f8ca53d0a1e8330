"""
Aspiration GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from .folder import Folder


@strawberry.type
class Aspiration:
    """Aspiration type for GraphQL API."""

    id: UUID
    username: str
    title: str
    description: str | None
    folder_id: UUID
    created_at: datetime
    updated_at: datetime

    @strawberry.field
    async def folder(
        self, info: strawberry.Info
    ) -> Annotated["Folder", strawberry.lazy(".folder")] | None:
        """Get the folder this aspiration belongs to."""
        from ..resolvers.aspiration import resolve_aspiration_folder

        return await resolve_aspiration_folder(self, info)
