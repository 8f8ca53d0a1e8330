"""
Main GraphQL schema definition using Strawberry
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter

from ..auth.middleware import get_auth_context
from ..auth.tokens import TokenService
from ..logging import get_logger
from .loaders import Loaders
from .mutations.root import Mutation
from .queries.root import Query

logger = get_logger(__name__)


class SchemaValidationError(Exception):
    """The GraphQL schema cannot be served."""


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
)


def validate_schema() -> None:
    """Fail fast on an unbuildable schema instead of on the first request.

    Runs graphql-core schema validation and a full introspection query.

    Raises:
        SchemaValidationError: listing every problem found
    """
    graphql_schema = schema._schema

    problems = [str(e) for e in gql_validate_schema(graphql_schema)]
    if not problems:
        introspection = graphql_sync(graphql_schema, get_introspection_query())
        problems = [str(e) for e in introspection.errors or []]

    if problems:
        logger.error("GraphQL schema validation failed", problems=problems)
        raise SchemaValidationError("; ".join(problems))

    logger.info(
        "GraphQL schema validated",
        types=len(graphql_schema.type_map),
    )


def build_context(
    token_service: TokenService, auth_context: Any = None, request: Request | None = None
) -> dict[str, Any]:
    """Assemble the per-request context dict shared by all resolvers."""
    return {
        "request": request,
        "auth": auth_context,
        "token_service": token_service,
        "loaders": Loaders(),
    }


def create_graphql_router(
    token_service: TokenService, graphiql: bool = True
) -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI bound to ``token_service``."""

    async def get_context(request: Request) -> dict[str, Any]:
        """Get the context for GraphQL resolvers."""
        auth_context = await get_auth_context(request, token_service)
        return build_context(token_service, auth_context, request)

    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql" if graphiql else None,
        context_getter=get_context,
    )
