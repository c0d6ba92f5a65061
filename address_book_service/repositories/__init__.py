"""Repository layer for data access."""

from address_book_service.repositories.base import AddressRepository
from address_book_service.repositories.connection import DatabaseManager, RedisConnectionManager
from address_book_service.repositories.redis_repository import RedisAddressRepository
from address_book_service.repositories.sqlalchemy_repository import SQLAlchemyAddressRepository

__all__ = [
    "AddressRepository",
    "DatabaseManager",
    "RedisConnectionManager",
    "RedisAddressRepository",
    "SQLAlchemyAddressRepository",
]
