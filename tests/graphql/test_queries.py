"""Tests for the public read queries, executed through the schema."""

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy import update

from aspire.database.connection import get_async_session
from aspire.dbmodels import Aspirations, Folders
from aspire.graphql.mutations.root import AddAspirationInput, AddFolderInput
from aspire.graphql.resolvers.aspiration import add_aspiration
from aspire.graphql.resolvers.auth import sign_up
from aspire.graphql.resolvers.folder import add_folder
from aspire.graphql.schema import schema


async def _set_created_at(model, id, created_at: datetime) -> None:
    async with get_async_session() as session:
        await session.execute(update(model).where(model.id == id).values(created_at=created_at))


@pytest_asyncio.fixture
async def content(signed_up, anonymous_info, make_info, token_service):
    """Alice owns a folder with two aspirations; bob owns one folder with one."""
    from aspire.auth.context import AuthContext

    bob_payload = await sign_up(anonymous_info, "bob", "bob@example.com", "hunter2")
    bob_info = make_info(
        AuthContext.from_result(token_service.verify(bob_payload.token), bob_payload.token)
    )

    alice_folder = await add_folder(signed_up.info, AddFolderInput(title="Travel"))
    bob_folder = await add_folder(bob_info, AddFolderInput(title="Career"))
    kyoto = await add_aspiration(
        signed_up.info, AddAspirationInput(folder_id=alice_folder.id, title="Kyoto")
    )
    lisbon = await add_aspiration(
        signed_up.info, AddAspirationInput(folder_id=alice_folder.id, title="Lisbon")
    )
    promotion = await add_aspiration(
        bob_info, AddAspirationInput(folder_id=bob_folder.id, title="Promotion")
    )

    base = datetime(2026, 1, 1, tzinfo=UTC)
    await _set_created_at(Folders, alice_folder.id, base)
    await _set_created_at(Folders, bob_folder.id, base + timedelta(days=1))
    await _set_created_at(Aspirations, kyoto.id, base)
    await _set_created_at(Aspirations, lisbon.id, base + timedelta(days=2))
    await _set_created_at(Aspirations, promotion.id, base + timedelta(days=1))

    return {
        "alice_folder": alice_folder,
        "bob_folder": bob_folder,
        "kyoto": kyoto,
        "lisbon": lisbon,
        "promotion": promotion,
    }


@pytest.mark.asyncio
async def test_aspirations_newest_first(content, context_for):
    result = await schema.execute("{ aspirations { title } }", context_value=context_for())

    assert result.errors is None
    assert [a["title"] for a in result.data["aspirations"]] == ["Lisbon", "Promotion", "Kyoto"]


@pytest.mark.asyncio
async def test_aspirations_filtered_by_username(content, context_for):
    result = await schema.execute(
        '{ aspirations(username: "bob") { title username } }', context_value=context_for()
    )

    assert result.errors is None
    assert result.data["aspirations"] == [{"title": "Promotion", "username": "bob"}]


@pytest.mark.asyncio
async def test_folders_newest_first_and_filtered(content, context_for):
    everyone = await schema.execute("{ folders { title } }", context_value=context_for())
    alice = await schema.execute(
        '{ folders(username: "alice") { title aspirationCount } }', context_value=context_for()
    )

    assert [f["title"] for f in everyone.data["folders"]] == ["Career", "Travel"]
    assert alice.data["folders"] == [{"title": "Travel", "aspirationCount": 2}]


@pytest.mark.asyncio
async def test_single_lookups(content, context_for):
    folder_id = str(content["alice_folder"].id)
    result = await schema.execute(
        f'{{ folder(id: "{folder_id}") {{ title aspirations {{ title }} }} '
        f'aspiration(id: "{content["promotion"].id}") {{ title folder {{ title }} }} }}',
        context_value=context_for(),
    )

    assert result.errors is None
    assert result.data["folder"] == {
        "title": "Travel",
        "aspirations": [{"title": "Kyoto"}, {"title": "Lisbon"}],
    }
    assert result.data["aspiration"] == {"title": "Promotion", "folder": {"title": "Career"}}


@pytest.mark.asyncio
async def test_unknown_ids_resolve_to_null(database, context_for):
    result = await schema.execute(
        '{ folder(id: "00000000-0000-0000-0000-000000000000") { id } '
        'aspiration(id: "00000000-0000-0000-0000-000000000000") { id } }',
        context_value=context_for(),
    )

    assert result.errors is None
    assert result.data == {"folder": None, "aspiration": None}


@pytest.mark.asyncio
async def test_users_and_user_lookup(content, context_for):
    result = await schema.execute(
        '{ users { username } user(username: "alice") { email folderCount aspirationCount '
        "folders { title } aspirations { title } } }",
        context_value=context_for(),
    )

    assert result.errors is None
    assert {u["username"] for u in result.data["users"]} == {"alice", "bob"}
    assert result.data["user"] == {
        "email": "alice@example.com",
        "folderCount": 1,
        "aspirationCount": 2,
        "folders": [{"title": "Travel"}],
        "aspirations": [{"title": "Kyoto"}, {"title": "Lisbon"}],
    }


@pytest.mark.asyncio
async def test_user_type_has_no_password_field(database, context_for):
    result = await schema.execute("{ users { password } }", context_value=context_for())

    assert result.data is None
    assert "password" in result.errors[0].message


@pytest.mark.asyncio
async def test_me_returns_the_caller(signed_up, context_for):
    result = await schema.execute(
        "{ me { username email } }", context_value=context_for(signed_up.token)
    )

    assert result.errors is None
    assert result.data["me"] == {"username": "alice", "email": "alice@example.com"}


@pytest.mark.asyncio
async def test_me_requires_a_token(database, context_for):
    result = await schema.execute("{ me { username } }", context_value=context_for())

    assert result.data == {"me": None}
    assert result.errors[0].message == "Not logged in"
    assert result.errors[0].extensions == {"code": "UNAUTHENTICATED"}
