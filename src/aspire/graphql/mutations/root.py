"""
Root GraphQL mutation definitions
"""

from uuid import UUID

import strawberry

from ..types.aspiration import Aspiration
from ..types.folder import Folder
from ..types.user import AuthPayload, User


# Input types for mutations
@strawberry.input
class AddFolderInput:
    """Input for creating a new folder."""

    title: str
    description: str | None = None


@strawberry.input
class UpdateFolderInput:
    """Input for updating a folder. Omitted fields are left unchanged."""

    folder_id: UUID
    title: str | None = None
    description: str | None = None


@strawberry.input
class AddAspirationInput:
    """Input for creating a new aspiration inside a folder."""

    folder_id: UUID
    title: str
    description: str | None = None


@strawberry.input
class UpdateAspirationInput:
    """Input for updating an aspiration. Omitted fields are left unchanged."""

    aspiration_id: UUID
    title: str | None = None
    description: str | None = None


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Account mutations
    @strawberry.mutation(name="signUp")
    async def sign_up(
        self, info: strawberry.Info, username: str, email: str, password: str
    ) -> AuthPayload:
        """Create an account and return a token for it."""
        from ..resolvers.auth import sign_up

        return await sign_up(info, username, email, password)

    @strawberry.mutation
    async def login(self, info: strawberry.Info, email: str, password: str) -> AuthPayload:
        """Log in with email and password."""
        from ..resolvers.auth import login

        return await login(info, email, password)

    # Aspiration mutations
    @strawberry.mutation(name="addAspiration")
    async def add_aspiration(self, info: strawberry.Info, input: AddAspirationInput) -> Aspiration:
        """Create an aspiration in one of the caller's folders."""
        from ..resolvers.aspiration import add_aspiration

        return await add_aspiration(info, input)

    @strawberry.mutation(name="removeAspiration")
    async def remove_aspiration(
        self, info: strawberry.Info, aspiration_id: UUID, folder_id: UUID
    ) -> User | None:
        """Delete an aspiration and return the updated caller."""
        from ..resolvers.aspiration import remove_aspiration

        return await remove_aspiration(info, aspiration_id, folder_id)

    @strawberry.mutation(name="updateAspiration")
    async def update_aspiration(
        self, info: strawberry.Info, input: UpdateAspirationInput
    ) -> Aspiration | None:
        """Update an aspiration's content."""
        from ..resolvers.aspiration import update_aspiration

        return await update_aspiration(info, input)

    # Folder mutations
    @strawberry.mutation(name="addFolder")
    async def add_folder(self, info: strawberry.Info, input: AddFolderInput) -> Folder:
        """Create a folder owned by the caller."""
        from ..resolvers.folder import add_folder

        return await add_folder(info, input)

    @strawberry.mutation(name="removeFolder")
    async def remove_folder(self, info: strawberry.Info, folder_id: UUID) -> User | None:
        """Delete a folder with its aspirations and return the updated caller."""
        from ..resolvers.folder import remove_folder

        return await remove_folder(info, folder_id)

    @strawberry.mutation(name="updateFolder")
    async def update_folder(
        self, info: strawberry.Info, input: UpdateFolderInput
    ) -> Folder | None:
        """Update a folder's title or description."""
        from ..resolvers.folder import update_folder

        return await update_folder(info, input)
