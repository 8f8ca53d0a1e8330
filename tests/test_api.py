"""HTTP-level tests for the FastAPI application."""

import logging
from datetime import UTC, datetime, timedelta

import httpx
import pytest
import pytest_asyncio

from aspire.api.app import ConfigurationError, build_token_service, create_app
from aspire.auth.tokens import Identity
from aspire.config import DEFAULT_JWT_SECRET, Settings

TEST_SECRET = "test-secret-key-for-testing-only"

SIGN_UP = """
mutation SignUp($username: String!, $email: String!, $password: String!) {
  signUp(username: $username, email: $email, password: $password) {
    token
    user { id username email }
  }
}
"""

ME = "query Me { me { username } }"


@pytest.fixture
def app_settings() -> Settings:
    return Settings(jwt_secret=TEST_SECRET, debug=False, environment="test")


@pytest_asyncio.fixture
async def client(database, app_settings):
    app = create_app(app_settings)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


async def _sign_up(client: httpx.AsyncClient) -> dict:
    response = await client.post(
        "/graphql",
        json={
            "query": SIGN_UP,
            "variables": {"username": "alice", "email": "alice@example.com", "password": "s3cret"},
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert "errors" not in body
    return body["data"]["signUp"]


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_sign_up_over_http(client):
    payload = await _sign_up(client)

    assert payload["user"]["username"] == "alice"
    assert payload["user"]["email"] == "alice@example.com"
    assert payload["token"]


@pytest.mark.asyncio
async def test_token_from_authorization_header(client):
    token = (await _sign_up(client))["token"]

    response = await client.post(
        "/graphql", json={"query": ME}, headers={"Authorization": f"Bearer {token}"}
    )

    assert response.json()["data"]["me"] == {"username": "alice"}


@pytest.mark.asyncio
async def test_token_from_query_parameter(client):
    token = (await _sign_up(client))["token"]

    response = await client.post("/graphql", params={"token": token}, json={"query": ME})

    assert response.json()["data"]["me"] == {"username": "alice"}


@pytest.mark.asyncio
async def test_token_from_request_body(client):
    token = (await _sign_up(client))["token"]

    response = await client.post("/graphql", json={"query": ME, "token": token})

    assert response.json()["data"]["me"] == {"username": "alice"}


@pytest.mark.asyncio
async def test_body_token_wins_over_header(client):
    token = (await _sign_up(client))["token"]

    response = await client.post(
        "/graphql",
        json={"query": ME, "token": token},
        headers={"Authorization": "Bearer not-a-token"},
    )

    assert response.json()["data"]["me"] == {"username": "alice"}


@pytest.mark.asyncio
async def test_invalid_token_is_unauthenticated(client):
    response = await client.post(
        "/graphql", json={"query": ME}, headers={"Authorization": "Bearer garbage"}
    )

    body = response.json()
    assert response.status_code == 200
    assert body["data"] == {"me": None}
    assert body["errors"][0]["extensions"]["code"] == "UNAUTHENTICATED"


@pytest.mark.asyncio
async def test_expired_token_is_unauthenticated(client, app_settings):
    user = (await _sign_up(client))["user"]
    token_service = build_token_service(app_settings)
    expired = token_service.issue(
        Identity(id=user["id"], username=user["username"], email=user["email"]),
        now=datetime.now(UTC) - timedelta(hours=3),
    )

    response = await client.post(
        "/graphql",
        json={"query": 'mutation { addFolder(input: {title: "t"}) { id } }'},
        headers={"Authorization": expired},
    )

    body = response.json()
    assert body["data"] is None
    assert body["errors"][0]["message"] == "You need to be logged in!"


def test_default_secret_rejected_in_production():
    with pytest.raises(ConfigurationError):
        build_token_service(Settings(jwt_secret=DEFAULT_JWT_SECRET, environment="production"))


def test_default_secret_allowed_in_development():
    service = build_token_service(
        Settings(jwt_secret=DEFAULT_JWT_SECRET, environment="development")
    )

    assert service.secret_key == DEFAULT_JWT_SECRET


@pytest.mark.asyncio
async def test_lifespan_opens_the_configured_database():
    from aspire.database import connection

    app = create_app(
        Settings(jwt_secret=TEST_SECRET, debug=False, database_url="sqlite:///:memory:")
    )

    async with app.router.lifespan_context(app):
        assert str(connection.get_async_engine().url) == "sqlite+aiosqlite:///:memory:"

    assert connection._async_engine is None


def test_create_app_applies_log_level():
    create_app(Settings(jwt_secret=TEST_SECRET, debug=False, log_level="WARNING"))

    assert logging.getLogger().level == logging.WARNING


@pytest.mark.parametrize("graphiql", [True, False])
def test_graphql_router_builds_with_and_without_ide(graphiql, app_settings):
    from aspire.graphql.schema import create_graphql_router

    router = create_graphql_router(build_token_service(app_settings), graphiql=graphiql)

    assert router.graphql_ide == ("graphiql" if graphiql else None)
