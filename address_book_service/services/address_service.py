"""Address service with business logic."""

import logging
from typing import List

from address_book_service.config.logging import LoggingService
from address_book_service.exceptions import AddressNotFoundError, AddressValidationError
from address_book_service.models.schemas import AddressFields, AddressRecord
from address_book_service.repositories.base import AddressRepository

logger = logging.getLogger(__name__)
logging_service = LoggingService(__name__)


class AddressService:
    """Service layer for address operations."""

    def __init__(self, repository: AddressRepository):
        """Initialize service with repository dependency.

        Args:
            repository: AddressRepository implementation
        """
        self.repository = repository

    async def list_addresses(self) -> List[AddressRecord]:
        """Get all addresses in creation order."""
        try:
            records = await self.repository.list_all()
            logging_service.log_crud_operation("list", None, success=True, count=len(records))
            return records

        except Exception as e:
            logging_service.log_error(
                "Unexpected error during list operation",
                e,
                operation="list_addresses"
            )
            raise

    async def create_address(self, fields: AddressFields) -> AddressRecord:
        """Create a new address.

        Args:
            fields: Validated AddressFields

        Returns:
            Created AddressRecord with its assigned id

        Raises:
            AddressValidationError: If the store rejects the record
        """
        try:
            record = await self.repository.create(fields)
            logging_service.log_crud_operation("create", record.id, success=True)
            return record

        except AddressValidationError as e:
            logging_service.log_crud_operation("create", None, success=False, error=str(e))
            raise
        except Exception as e:
            logging_service.log_error(
                "Unexpected error during create operation",
                e,
                operation="create_address"
            )
            raise

    async def get_address(self, address_id: int) -> AddressRecord:
        """Get a single address.

        Raises:
            AddressNotFoundError: If the id is unknown
        """
        try:
            record = await self.repository.get_by_id(address_id)
            logging_service.log_crud_operation("read", address_id, success=True)
            return record

        except AddressNotFoundError:
            logging_service.log_crud_operation("read", address_id, success=False)
            raise
        except Exception as e:
            logging_service.log_error(
                "Unexpected error during get operation",
                e,
                address_id=address_id,
                operation="get_address"
            )
            raise

    async def delete_address(self, address_id: int) -> None:
        """Delete an address.

        Raises:
            AddressNotFoundError: If the id is unknown
        """
        try:
            await self.repository.delete_by_id(address_id)
            logging_service.log_crud_operation("delete", address_id, success=True)

        except AddressNotFoundError:
            logging_service.log_crud_operation("delete", address_id, success=False)
            raise
        except Exception as e:
            logging_service.log_error(
                "Unexpected error during delete operation",
                e,
                address_id=address_id,
                operation="delete_address"
            )
            raise
