"""Abstract repository interface for address data."""

from abc import ABC, abstractmethod
from typing import List

from address_book_service.models.schemas import AddressFields, AddressRecord


class AddressRepository(ABC):
    """Abstract repository interface for address operations."""

    @abstractmethod
    async def list_all(self) -> List[AddressRecord]:
        """Get every stored address.

        Returns:
            Addresses in creation order, empty list when the store is empty
        """

    @abstractmethod
    async def create(self, fields: AddressFields) -> AddressRecord:
        """Store a new address under a freshly assigned id.

        Args:
            fields: Validated address fields

        Returns:
            Created AddressRecord, including its id

        Raises:
            AddressValidationError: If the store rejects the write
        """

    @abstractmethod
    async def get_by_id(self, address_id: int) -> AddressRecord:
        """Get address by id.

        Raises:
            AddressNotFoundError: If no address has this id
        """

    @abstractmethod
    async def delete_by_id(self, address_id: int) -> None:
        """Delete address by id.

        Raises:
            AddressNotFoundError: If no address has this id
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """Check that the underlying store is reachable."""
