"""SQLAlchemy table mappings."""

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from address_book_service.models.schemas import NAME_MAX_LENGTH


class Base(DeclarativeBase):
    pass


class Address(Base):
    """Address row."""

    __tablename__ = "addresses"
    # AUTOINCREMENT keeps SQLite from handing out the id of a deleted row again
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(NAME_MAX_LENGTH), nullable=True)
    street: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"Address(id={self.id!r}, name={self.name!r})"
