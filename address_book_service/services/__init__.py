"""Service layer."""

from address_book_service.services.address_service import AddressService

__all__ = ["AddressService"]
