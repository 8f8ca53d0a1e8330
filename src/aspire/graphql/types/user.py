"""
User GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from .aspiration import Aspiration
    from .folder import Folder


@strawberry.type
class User:
    """User type for GraphQL API. The password hash is never exposed."""

    id: UUID
    username: str
    email: str
    aspiration_ids: list[UUID]
    folder_ids: list[UUID]
    created_at: datetime

    @strawberry.field
    async def aspirations(
        self, info: strawberry.Info
    ) -> list[Annotated["Aspiration", strawberry.lazy(".aspiration")]]:
        """Get the user's aspirations in the order they were added."""
        from ..resolvers.user import resolve_user_aspirations

        return await resolve_user_aspirations(self, info)

    @strawberry.field
    async def folders(
        self, info: strawberry.Info
    ) -> list[Annotated["Folder", strawberry.lazy(".folder")]]:
        """Get the user's folders in the order they were added."""
        from ..resolvers.user import resolve_user_folders

        return await resolve_user_folders(self, info)

    @strawberry.field
    def aspiration_count(self) -> int:
        return len(self.aspiration_ids)

    @strawberry.field
    def folder_count(self) -> int:
        return len(self.folder_ids)


@strawberry.type
class AuthPayload:
    """Result of signing up or logging in."""

    token: str
    user: User
