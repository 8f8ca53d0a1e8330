"""
Folder GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from .aspiration import Aspiration


@strawberry.type
class Folder:
    """Folder type for GraphQL API."""

    id: UUID
    username: str
    title: str
    description: str | None
    aspiration_ids: list[UUID]
    created_at: datetime
    updated_at: datetime

    @strawberry.field
    async def aspirations(
        self, info: strawberry.Info
    ) -> list[Annotated["Aspiration", strawberry.lazy(".aspiration")]]:
        """Get the aspirations stored in this folder."""
        from ..resolvers.folder import resolve_folder_aspirations

        return await resolve_folder_aspirations(self, info)

    @strawberry.field
    def aspiration_count(self) -> int:
        return len(self.aspiration_ids)
