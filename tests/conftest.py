"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import AsyncGenerator, Callable
from types import SimpleNamespace
from typing import Any

# Keep bcrypt cheap and point the app at SQLite before aspire is imported
os.environ.setdefault("ASPIRE_BCRYPT_ROUNDS", "4")
os.environ.setdefault("ASPIRE_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ASPIRE_DEBUG", "false")

import pytest
import pytest_asyncio

from aspire.auth.context import AuthContext
from aspire.auth.tokens import TokenService

TEST_SECRET = "test-secret-key-for-testing-only"
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Fresh in-memory database with every table created."""
    from aspire.database.connection import (
        create_all_tables,
        dispose_database,
        init_database,
    )

    init_database(TEST_DATABASE_URL, force_reinit=True)
    await create_all_tables()
    yield
    await dispose_database()


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(
        secret_key=TEST_SECRET,
        issuer="aspire",
        audience="aspire-api",
        token_expiry_hours=2,
    )


@pytest.fixture
def make_info(token_service: TokenService) -> Callable[..., Any]:
    """Build a stand-in for ``strawberry.Info`` carrying a resolver context."""
    from aspire.graphql.schema import build_context

    def _make(auth_context: AuthContext | None = None) -> Any:
        return SimpleNamespace(
            context=build_context(token_service, auth_context or AuthContext.anonymous()),
            field_name="test",
        )

    return _make


@pytest.fixture
def anonymous_info(make_info: Callable[..., Any]) -> Any:
    return make_info()


@pytest.fixture
def context_for(token_service: TokenService) -> Callable[..., dict[str, Any]]:
    """Build a ``schema.execute`` context value from an optional token."""
    from aspire.graphql.schema import build_context

    def _context(token: str | None = None) -> dict[str, Any]:
        auth_context = AuthContext.from_result(token_service.verify(token), token)
        return build_context(token_service, auth_context)

    return _context


@pytest_asyncio.fixture
async def signed_up(database: None, anonymous_info: Any, make_info: Callable[..., Any]) -> Any:
    """A registered user plus an authenticated info object for them."""
    from aspire.graphql.resolvers.auth import sign_up

    payload = await sign_up(anonymous_info, "alice", "alice@example.com", "s3cret")
    token_service = anonymous_info.context["token_service"]
    auth_context = AuthContext.from_result(token_service.verify(payload.token), payload.token)
    return SimpleNamespace(
        token=payload.token,
        user=payload.user,
        info=make_info(auth_context),
    )


@pytest_asyncio.fixture
async def other_user(signed_up: Any, anonymous_info: Any, make_info: Callable[..., Any]) -> Any:
    """A second registered user, bob, next to ``signed_up``."""
    from aspire.graphql.resolvers.auth import sign_up

    payload = await sign_up(anonymous_info, "bob", "bob@example.com", "hunter2")
    token_service = anonymous_info.context["token_service"]
    auth_context = AuthContext.from_result(token_service.verify(payload.token), payload.token)
    return SimpleNamespace(token=payload.token, user=payload.user, info=make_info(auth_context))


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
