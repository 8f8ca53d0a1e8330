"""Tests for folder mutation resolvers."""

import uuid

import pytest
from sqlalchemy import select

from aspire.database.connection import get_async_session
from aspire.dbmodels import Aspirations, Folders, Users
from aspire.graphql.mutations.root import (
    AddAspirationInput,
    AddFolderInput,
    UpdateFolderInput,
)
from aspire.graphql.resolvers.aspiration import add_aspiration
from aspire.graphql.resolvers.folder import add_folder, remove_folder, update_folder


async def _get(model, id):
    async with get_async_session() as session:
        return (await session.execute(select(model).where(model.id == id))).scalar_one_or_none()


async def _count(model) -> int:
    async with get_async_session() as session:
        return len((await session.execute(select(model))).scalars().all())


@pytest.mark.asyncio
async def test_add_folder_appends_to_user(signed_up):
    folder = await add_folder(
        signed_up.info, AddFolderInput(title="Travel", description="Places to go")
    )

    assert folder.title == "Travel"
    assert folder.description == "Places to go"
    assert folder.username == "alice"
    assert folder.aspiration_ids == []

    user = await _get(Users, signed_up.user.id)
    assert user.folder_ids == [str(folder.id)]


@pytest.mark.asyncio
async def test_remove_folder_cascades_to_aspirations(signed_up):
    folder = await add_folder(signed_up.info, AddFolderInput(title="Travel"))
    other = await add_folder(signed_up.info, AddFolderInput(title="Career"))
    first = await add_aspiration(
        signed_up.info, AddAspirationInput(folder_id=folder.id, title="Kyoto")
    )
    second = await add_aspiration(
        signed_up.info, AddAspirationInput(folder_id=folder.id, title="Lisbon")
    )
    kept = await add_aspiration(
        signed_up.info, AddAspirationInput(folder_id=other.id, title="Promotion")
    )

    user = await remove_folder(signed_up.info, folder.id)

    assert user.folder_ids == [other.id]
    assert user.aspiration_ids == [kept.id]
    assert await _get(Folders, folder.id) is None
    assert await _get(Aspirations, first.id) is None
    assert await _get(Aspirations, second.id) is None
    assert await _get(Aspirations, kept.id) is not None


@pytest.mark.asyncio
async def test_remove_unknown_folder_is_a_no_op(signed_up):
    folder = await add_folder(signed_up.info, AddFolderInput(title="Travel"))

    user = await remove_folder(signed_up.info, uuid.uuid4())

    assert user.id == signed_up.user.id
    assert user.folder_ids == [folder.id]
    assert await _count(Folders) == 1


@pytest.mark.asyncio
async def test_update_folder_changes_only_given_fields(signed_up):
    folder = await add_folder(
        signed_up.info, AddFolderInput(title="Travel", description="Places to go")
    )

    updated = await update_folder(
        signed_up.info, UpdateFolderInput(folder_id=folder.id, title="Trips")
    )

    assert updated.id == folder.id
    assert updated.title == "Trips"
    assert updated.description == "Places to go"
    assert updated.username == "alice"

    stored = await _get(Folders, folder.id)
    assert stored.title == "Trips"


@pytest.mark.asyncio
async def test_update_unknown_folder_returns_none(signed_up):
    result = await update_folder(
        signed_up.info, UpdateFolderInput(folder_id=uuid.uuid4(), title="Nothing")
    )

    assert result is None


@pytest.mark.asyncio
async def test_remove_folder_cleans_other_users_lists(signed_up, other_user):
    folder = await add_folder(signed_up.info, AddFolderInput(title="Shared"))
    bobs = await add_aspiration(
        other_user.info, AddAspirationInput(folder_id=folder.id, title="Bob's idea")
    )

    await remove_folder(signed_up.info, folder.id)

    bob = await _get(Users, other_user.user.id)
    assert bob.aspiration_ids == []
    assert await _get(Aspirations, bobs.id) is None


@pytest.mark.asyncio
async def test_remove_folder_by_non_owner_cleans_owner(signed_up, other_user):
    folder = await add_folder(signed_up.info, AddFolderInput(title="Travel"))
    await add_aspiration(signed_up.info, AddAspirationInput(folder_id=folder.id, title="Kyoto"))

    returned = await remove_folder(other_user.info, folder.id)

    assert returned.id == other_user.user.id
    alice = await _get(Users, signed_up.user.id)
    assert alice.folder_ids == []
    assert alice.aspiration_ids == []
