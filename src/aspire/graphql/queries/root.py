"""
Root GraphQL query definitions
"""

from uuid import UUID

import strawberry

from ..types.aspiration import Aspiration
from ..types.folder import Folder
from ..types.user import User


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def me(self, info: strawberry.Info) -> User | None:
        """Get the current authenticated user."""
        from ..resolvers.user import resolve_current_user

        return await resolve_current_user(info)

    @strawberry.field
    async def users(self, info: strawberry.Info) -> list[User]:
        """Get all users."""
        from ..resolvers.user import resolve_users

        return await resolve_users(info)

    @strawberry.field
    async def user(self, info: strawberry.Info, username: str) -> User | None:
        """Get a user by username."""
        from ..resolvers.user import resolve_user_by_username

        return await resolve_user_by_username(info, username)

    @strawberry.field
    async def aspirations(
        self, info: strawberry.Info, username: str | None = None
    ) -> list[Aspiration]:
        """Get aspirations, newest first, optionally for one user."""
        from ..resolvers.aspiration import resolve_aspirations

        return await resolve_aspirations(info, username)

    @strawberry.field
    async def aspiration(self, info: strawberry.Info, id: UUID) -> Aspiration | None:
        """Get an aspiration by ID."""
        from ..resolvers.aspiration import resolve_aspiration_by_id

        return await resolve_aspiration_by_id(info, id)

    @strawberry.field
    async def folders(self, info: strawberry.Info, username: str | None = None) -> list[Folder]:
        """Get folders, newest first, optionally for one user."""
        from ..resolvers.folder import resolve_folders

        return await resolve_folders(info, username)

    @strawberry.field
    async def folder(self, info: strawberry.Info, id: UUID) -> Folder | None:
        """Get a folder by ID."""
        from ..resolvers.folder import resolve_folder_by_id

        return await resolve_folder_by_id(info, id)
