"""SQLAlchemy implementation of AddressRepository."""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError

from address_book_service.exceptions import AddressNotFoundError, AddressValidationError
from address_book_service.models.orm import Address
from address_book_service.models.schemas import AddressFields, AddressRecord
from address_book_service.repositories.base import AddressRepository
from address_book_service.repositories.connection import DatabaseManager

logger = logging.getLogger(__name__)

# INTEGER PRIMARY KEY is a signed 64-bit value
MIN_ID = -2 ** 63
MAX_ID = 2 ** 63 - 1


class SQLAlchemyAddressRepository(AddressRepository):
    """Address storage in a relational database through the SQLAlchemy ORM."""

    def __init__(self, database: DatabaseManager):
        self._database = database

    async def list_all(self) -> List[AddressRecord]:
        try:
            async with self._database.session() as session:
                result = await session.scalars(select(Address).order_by(Address.id))
                records = [AddressRecord.model_validate(row) for row in result]

            logger.debug(
                "Addresses listed",
                extra={"count": len(records), "operation": "list"}
            )
            return records

        except SQLAlchemyError as e:
            logger.error(
                "Database error during list operation",
                extra={"error": str(e), "operation": "list"}
            )
            raise

    async def create(self, fields: AddressFields) -> AddressRecord:
        try:
            async with self._database.session() as session:
                address = Address(name=fields.name, street=fields.street)
                session.add(address)
                await session.commit()
                record = AddressRecord.model_validate(address)

            logger.info(
                "Address created",
                extra={"address_id": record.id, "operation": "create"}
            )
            return record

        except (IntegrityError, DataError) as e:
            logger.warning(
                "Database rejected address",
                extra={"error": str(e), "operation": "create"}
            )
            raise AddressValidationError(str(e.orig)) from e

        except SQLAlchemyError as e:
            logger.error(
                "Database error during create operation",
                extra={"error": str(e), "operation": "create"}
            )
            raise

    async def get_by_id(self, address_id: int) -> AddressRecord:
        if not MIN_ID <= address_id <= MAX_ID:
            raise AddressNotFoundError(address_id)

        try:
            async with self._database.session() as session:
                address = await session.get(Address, address_id)
                if address is None:
                    logger.debug(
                        "Address not found",
                        extra={"address_id": address_id, "operation": "get"}
                    )
                    raise AddressNotFoundError(address_id)

                return AddressRecord.model_validate(address)

        except SQLAlchemyError as e:
            logger.error(
                "Database error during get operation",
                extra={"address_id": address_id, "error": str(e), "operation": "get"}
            )
            raise

    async def delete_by_id(self, address_id: int) -> None:
        if not MIN_ID <= address_id <= MAX_ID:
            raise AddressNotFoundError(address_id)

        try:
            async with self._database.session() as session:
                address = await session.get(Address, address_id)
                if address is None:
                    logger.debug(
                        "Address not found for deletion",
                        extra={"address_id": address_id, "operation": "delete"}
                    )
                    raise AddressNotFoundError(address_id)

                await session.delete(address)
                await session.commit()

            logger.info(
                "Address deleted",
                extra={"address_id": address_id, "operation": "delete"}
            )

        except SQLAlchemyError as e:
            logger.error(
                "Database error during delete operation",
                extra={"address_id": address_id, "error": str(e), "operation": "delete"}
            )
            raise

    async def health_check(self) -> bool:
        return await self._database.health_check()
