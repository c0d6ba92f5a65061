"""Address resource handler.

Maps list / new-form / create / delete requests onto the address service and
answers with a ``RenderView`` or ``Redirect`` outcome. Nothing here knows
about the web framework; the API layer turns outcomes into responses.
"""

from typing import Any, Mapping

from pydantic import ValidationError

from address_book_service.config.logging import LoggingService
from address_book_service.exceptions import AddressValidationError
from address_book_service.models.schemas import (
    AddressFields,
    AddressRecord,
    HandlerOutcome,
    Redirect,
    RenderView,
)
from address_book_service.services.address_service import AddressService

logging_service = LoggingService(__name__)

LIST_PATH = "/addresses"
NEW_FORM_PATH = "/addresses/new"


class AddressResourceHandler:
    """Stateless handler for the addresses resource."""

    def __init__(self, service: AddressService):
        self.service = service

    async def list(self) -> HandlerOutcome:
        addresses = await self.service.list_addresses()
        return RenderView(name="addresses/index.html", data={"addresses": addresses})

    async def new_form(self) -> HandlerOutcome:
        return RenderView(name="addresses/new.html", data={"address": AddressRecord()})

    async def create(self, raw_fields: Mapping[str, Any]) -> HandlerOutcome:
        """Create an address from submitted form fields.

        Any failure, whether the fields are malformed or the store refuses
        them, sends the client back to the form without a message.
        """
        try:
            fields = AddressFields.model_validate(dict(raw_fields))
        except ValidationError as e:
            logging_service.log_operation(
                "warning",
                "Invalid address fields submitted",
                operation="create",
                error=str(e)
            )
            return Redirect(target=NEW_FORM_PATH)

        try:
            await self.service.create_address(fields)
        except AddressValidationError:
            return Redirect(target=NEW_FORM_PATH)

        return Redirect(target=LIST_PATH)

    async def delete(self, address_id: int) -> HandlerOutcome:
        """Delete an address; AddressNotFoundError propagates to the caller."""
        await self.service.delete_address(address_id)
        return Redirect(target=LIST_PATH)
