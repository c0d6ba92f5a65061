"""Store connection management with health checks and error handling."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import ConnectionError, TimeoutError, RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from address_book_service.config.settings import Settings
from address_book_service.models.orm import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the SQLAlchemy engine and session factory for one application."""

    def __init__(self, app_settings: Settings):
        self._settings = app_settings
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._is_connected = False

    async def initialize(self) -> None:
        """Create the engine and bring the schema up to date."""
        try:
            self._engine = create_async_engine(
                self._settings.database_url,
                echo=self._settings.database_echo,
            )
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

            self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)
            self._is_connected = True

            logger.info(
                "Database initialized successfully",
                extra={"database_url": self._engine.url.render_as_string(hide_password=True)}
            )

        except Exception as e:
            logger.error(
                "Failed to initialize database",
                extra={"error": str(e)}
            )
            raise

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session; one per unit of work."""
        if self._session_factory is None:
            await self.initialize()

        async with self._session_factory() as session:
            yield session

    async def health_check(self) -> bool:
        """Run a trivial query against the database."""
        if self._engine is None:
            return False

        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.debug("Database health check passed")
            return True

        except SQLAlchemyError as e:
            logger.warning(
                "Database health check failed",
                extra={"error": str(e)}
            )
            self._is_connected = False
            return False

    async def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

        self._is_connected = False
        logger.info("Database connection closed successfully")

    @property
    def is_connected(self) -> bool:
        return self._is_connected


class RedisConnectionManager:
    """Manages Redis connection pool with health checks and error handling."""

    def __init__(self, app_settings: Settings):
        self._settings = app_settings
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = None
        self._is_connected = False

    async def initialize(self) -> None:
        """Initialize Redis connection pool."""
        try:
            self._pool = ConnectionPool(
                host=self._settings.redis_host,
                port=self._settings.redis_port,
                db=self._settings.redis_db,
                password=self._settings.redis_password,
                socket_timeout=self._settings.redis_socket_timeout,
                socket_connect_timeout=self._settings.redis_connection_timeout,
                max_connections=self._settings.redis_max_connections,
                decode_responses=True,
                retry_on_timeout=True,
                health_check_interval=30
            )

            self._client = Redis(connection_pool=self._pool)

            # Test connection
            self._is_connected = await self.health_check()

            logger.info(
                "Redis connection initialized",
                extra={
                    "redis_host": self._settings.redis_host,
                    "redis_port": self._settings.redis_port,
                    "redis_db": self._settings.redis_db,
                    "connected": self._is_connected
                }
            )

        except Exception as e:
            logger.error(
                "Failed to initialize Redis connection",
                extra={
                    "error": str(e),
                    "redis_host": self._settings.redis_host,
                    "redis_port": self._settings.redis_port
                }
            )
            raise

    async def get_client(self) -> Redis:
        """Get Redis client instance."""
        if not self._client or not self._is_connected:
            await self.initialize()

        return self._client

    async def health_check(self) -> bool:
        """Perform Redis health check."""
        try:
            if not self._client:
                return False

            if await self._client.ping():
                logger.debug("Redis health check passed")
                return True

            logger.warning("Redis health check failed: ping returned False")
            return False

        except (ConnectionError, TimeoutError) as e:
            logger.warning(
                "Redis health check failed: connection error",
                extra={"error": str(e)}
            )
            self._is_connected = False
            return False

        except RedisError as e:
            logger.error(
                "Redis health check failed: Redis error",
                extra={"error": str(e)}
            )
            self._is_connected = False
            return False

    async def close(self) -> None:
        """Close Redis connection pool."""
        if self._client:
            await self._client.aclose()
            self._client = None

        if self._pool:
            await self._pool.aclose()
            self._pool = None

        self._is_connected = False
        logger.info("Redis connection closed successfully")

    @property
    def is_connected(self) -> bool:
        return self._is_connected
