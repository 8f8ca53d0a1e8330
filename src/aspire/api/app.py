"""
Main FastAPI application for the Aspire backend
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..auth.tokens import TokenService
from ..config import DEFAULT_JWT_SECRET, Settings, is_production, settings
from ..database import init_database
from ..database.connection import dispose_database, test_database_connection
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

logger = get_logger(__name__)


class ConfigurationError(Exception):
    """Raised when the application cannot start with the given settings."""


def build_token_service(app_settings: Settings) -> TokenService:
    """Create the token service from settings, refusing the dev secret in production."""
    if app_settings.jwt_secret == DEFAULT_JWT_SECRET:
        if is_production(app_settings):
            raise ConfigurationError("ASPIRE_JWT_SECRET must be set in production")
        logger.warning("Using the development JWT secret; set ASPIRE_JWT_SECRET")

    return TokenService(
        secret_key=app_settings.jwt_secret,
        algorithm=app_settings.jwt_algorithm,
        issuer=app_settings.jwt_issuer,
        audience=app_settings.jwt_audience,
        token_expiry_hours=app_settings.token_expiry_hours,
    )


def build_lifespan(app_settings: Settings):
    """Lifespan bound to ``app_settings``: opens its database and disposes it on shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Aspire API...", environment=app_settings.environment)
        init_database(app_settings.database_url, force_reinit=True)

        ok, error = await test_database_connection()
        if ok:
            logger.info("Database connection verified")
        elif is_production(app_settings):
            logger.error("Database connection failed", error=error)
            raise ConfigurationError(error or "Database connection failed")
        else:
            logger.warning("Database connection failed", error=error)

        yield

        logger.info("Shutting down Aspire API...")
        await dispose_database()

    return lifespan


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app_settings = app_settings or settings
    configure_logging(debug=app_settings.debug, level=app_settings.log_level)
    token_service = build_token_service(app_settings)

    app = FastAPI(
        title="Aspire API",
        description="Aspirations and folders behind a GraphQL API",
        version=__version__,
        lifespan=build_lifespan(app_settings),
        debug=app_settings.debug,
    )
    app.state.token_service = token_service

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    from ..graphql.schema import create_graphql_router, validate_schema

    logger.info("Validating GraphQL schema...")
    validate_schema()

    graphql_router = create_graphql_router(token_service, graphiql=app_settings.debug)
    app.include_router(graphql_router, prefix="")
    logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "aspire.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
