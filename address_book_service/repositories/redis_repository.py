"""Redis implementation of AddressRepository."""

import logging
from typing import List

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import ConnectionError, TimeoutError, RedisError

from address_book_service.config.logging import LoggingService
from address_book_service.exceptions import AddressNotFoundError, AddressStorageError
from address_book_service.models.schemas import AddressFields, AddressRecord
from address_book_service.repositories.base import AddressRepository
from address_book_service.repositories.connection import RedisConnectionManager

logger = logging.getLogger(__name__)
logging_service = LoggingService(__name__)


class RedisAddressRepository(AddressRepository):
    """Redis implementation of AddressRepository.

    Records live as JSON under ``address:<id>``. Ids come from ``INCR`` on a
    counter key, so they grow monotonically and are never handed out twice.
    A list of ids preserves creation order for ``list_all``.
    """

    NEXT_ID_KEY = "addresses:next_id"
    IDS_KEY = "addresses:ids"

    def __init__(self, connection: RedisConnectionManager):
        self._connection = connection
        self._key_prefix = "address:"

    def _make_key(self, address_id: int) -> str:
        """Create Redis key for an address id."""
        return f"{self._key_prefix}{address_id}"

    async def _get_redis_client(self) -> Redis:
        """Get Redis client with error handling."""
        try:
            return await self._connection.get_client()
        except (ConnectionError, TimeoutError) as e:
            logging_service.log_error(
                "Redis connection error",
                e,
                operation="get_client"
            )
            raise ConnectionError("Redis service unavailable") from e

    def _parse(self, data: str) -> AddressRecord:
        try:
            return AddressRecord.model_validate_json(data)
        except ValidationError as e:
            logger.error(
                "Failed to parse stored JSON data",
                extra={"error": str(e)}
            )
            raise AddressStorageError("Corrupted data in storage") from e

    async def list_all(self) -> List[AddressRecord]:
        try:
            redis_client = await self._get_redis_client()

            ids = await redis_client.lrange(self.IDS_KEY, 0, -1)
            if not ids:
                return []

            values = await redis_client.mget([self._make_key(int(i)) for i in ids])
            records = [self._parse(value) for value in values if value is not None]

            logger.debug(
                "Addresses listed",
                extra={"count": len(records), "operation": "list"}
            )
            return records

        except (ConnectionError, TimeoutError) as e:
            logger.error(
                "Redis connection error during list operation",
                extra={"error": str(e), "operation": "list"}
            )
            raise ConnectionError("Redis service unavailable") from e

    async def create(self, fields: AddressFields) -> AddressRecord:
        try:
            redis_client = await self._get_redis_client()

            address_id = await redis_client.incr(self.NEXT_ID_KEY)
            record = AddressRecord(id=address_id, name=fields.name, street=fields.street)

            # Record and its place in the id list are written in one MULTI/EXEC
            async with redis_client.pipeline(transaction=True) as pipe:
                pipe.set(self._make_key(address_id), record.model_dump_json())
                pipe.rpush(self.IDS_KEY, address_id)
                success, _ = await pipe.execute()

            if not success:
                logger.error(
                    "Failed to store record in Redis",
                    extra={"address_id": address_id, "operation": "create"}
                )
                raise RuntimeError("Failed to store record")

            logger.info(
                "Address created",
                extra={"address_id": address_id, "operation": "create"}
            )
            return record

        except (ConnectionError, TimeoutError) as e:
            logger.error(
                "Redis connection error during create operation",
                extra={"error": str(e), "operation": "create"}
            )
            raise ConnectionError("Redis service unavailable") from e

        except RedisError as e:
            logger.error(
                "Redis error during create operation",
                extra={"error": str(e), "operation": "create"}
            )
            raise

    async def get_by_id(self, address_id: int) -> AddressRecord:
        try:
            redis_client = await self._get_redis_client()

            data = await redis_client.get(self._make_key(address_id))
            if data is None:
                logger.debug(
                    "Address not found",
                    extra={"address_id": address_id, "operation": "get"}
                )
                raise AddressNotFoundError(address_id)

            return self._parse(data)

        except (ConnectionError, TimeoutError) as e:
            logger.error(
                "Redis connection error during get operation",
                extra={"address_id": address_id, "error": str(e), "operation": "get"}
            )
            raise ConnectionError("Redis service unavailable") from e

    async def delete_by_id(self, address_id: int) -> None:
        try:
            redis_client = await self._get_redis_client()

            # Key and list entry go together; LREM is a no-op for unknown ids
            async with redis_client.pipeline(transaction=True) as pipe:
                pipe.delete(self._make_key(address_id))
                pipe.lrem(self.IDS_KEY, 0, address_id)
                deleted_count, _ = await pipe.execute()

            if deleted_count == 0:
                logger.debug(
                    "Address not found for deletion",
                    extra={"address_id": address_id, "operation": "delete"}
                )
                raise AddressNotFoundError(address_id)

            logger.info(
                "Address deleted",
                extra={"address_id": address_id, "operation": "delete"}
            )

        except (ConnectionError, TimeoutError) as e:
            logger.error(
                "Redis connection error during delete operation",
                extra={"address_id": address_id, "error": str(e), "operation": "delete"}
            )
            raise ConnectionError("Redis service unavailable") from e

    async def health_check(self) -> bool:
        return await self._connection.health_check()
