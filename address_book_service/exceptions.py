"""Errors raised by the address book persistence layer."""


class AddressBookError(Exception):
    """Base class for address book errors."""


class AddressValidationError(AddressBookError, ValueError):
    """The store rejected a write, e.g. on a constraint violation."""


class AddressNotFoundError(AddressBookError, LookupError):
    """No address with the requested id exists."""

    def __init__(self, address_id: int):
        super().__init__(f"Address {address_id} not found")
        self.address_id = address_id


class AddressStorageError(AddressBookError):
    """Stored data could not be read back."""
