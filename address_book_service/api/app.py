"""FastAPI application factory and configuration."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional, Tuple, Union

from fastapi import FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

from address_book_service import __version__
from address_book_service.api import addresses, examples
from address_book_service.api.middleware import (
    CorrelationIdMiddleware,
    CsrfTokenMiddleware,
    ErrorHandlingMiddleware,
    LoggingMiddleware,
)
from address_book_service.api.templating import build_templates, render
from address_book_service.config.logging import LoggingService
from address_book_service.config.settings import Settings, settings
from address_book_service.exceptions import AddressNotFoundError
from address_book_service.models.schemas import HealthCheckResponse
from address_book_service.repositories.base import AddressRepository
from address_book_service.repositories.connection import DatabaseManager, RedisConnectionManager
from address_book_service.repositories.redis_repository import RedisAddressRepository
from address_book_service.repositories.sqlalchemy_repository import SQLAlchemyAddressRepository

logger = logging.getLogger(__name__)
logging_service = LoggingService(__name__)

StoreManager = Union[DatabaseManager, RedisConnectionManager]


def build_storage(app_settings: Settings) -> Tuple[StoreManager, AddressRepository]:
    """Create the store manager and repository for the configured backend."""
    if app_settings.storage_backend == "redis":
        redis_manager = RedisConnectionManager(app_settings)
        return redis_manager, RedisAddressRepository(redis_manager)

    database = DatabaseManager(app_settings)
    return database, SQLAlchemyAddressRepository(database)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the store on startup and close it on shutdown."""
    backend = app.state.settings.storage_backend
    logging_service.log_operation(
        "info",
        "Address Book Service starting up...",
        operation="service_startup",
        storage_backend=backend
    )

    try:
        await app.state.store.initialize()
        logging_service.log_operation(
            "info",
            "Storage initialized successfully",
            operation="storage_startup",
            storage_backend=backend
        )
    except Exception as e:
        # Don't fail startup - let health check report storage availability
        logging_service.log_error(
            "Failed to initialize storage during startup",
            e,
            operation="storage_startup",
            storage_backend=backend
        )

    yield

    logging_service.log_operation(
        "info",
        "Address Book Service shutting down...",
        operation="service_shutdown"
    )

    try:
        await app.state.store.close()
    except Exception as e:
        logging_service.log_error(
            "Error closing storage during shutdown",
            e,
            operation="storage_shutdown"
        )


async def address_not_found_handler(request: Request, exc: AddressNotFoundError):
    logging_service.log_operation(
        "warning",
        "Address not found",
        address_id=exc.address_id,
        operation="not_found",
        path=str(request.url.path)
    )
    return render(request, "not_found.html", {"message": str(exc)}, status_code=404)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    app_settings = app_settings or settings

    app = FastAPI(
        title="Address Book Service",
        description="Routing examples and a small address book",
        version=__version__,
        lifespan=lifespan,
    )

    store, repository = build_storage(app_settings)
    app.state.settings = app_settings
    app.state.store = store
    app.state.repository = repository
    app.state.templates = build_templates(app_settings.templates_dir)

    # Innermost first: the CSRF filter needs the session, everything needs a correlation id
    app.add_middleware(CsrfTokenMiddleware)
    app.add_middleware(SessionMiddleware, secret_key=app_settings.session_secret)
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    app.add_exception_handler(AddressNotFoundError, address_not_found_handler)

    @app.get("/health", response_model=HealthCheckResponse)
    async def health_check(request: Request):
        """Health check endpoint with storage connectivity check."""
        storage_connected = await request.app.state.repository.health_check()

        if storage_connected:
            status = "healthy"
        else:
            status = "degraded"
            logging_service.log_operation(
                "warning",
                "Health check shows degraded status - storage unavailable",
                operation="health_check",
                storage_backend=app_settings.storage_backend
            )

        return HealthCheckResponse(
            status=status,
            storage_backend=app_settings.storage_backend,
            storage_connected=storage_connected
        )

    app.include_router(addresses.router)
    app.include_router(examples.router)

    return app


# Create the application instance
app = create_app()
