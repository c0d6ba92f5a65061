"""Framework-free request handlers."""

from address_book_service.handlers.addresses import AddressResourceHandler

__all__ = ["AddressResourceHandler"]
