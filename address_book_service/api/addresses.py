"""HTTP routes for the addresses resource."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status

from address_book_service.api.templating import respond
from address_book_service.handlers.addresses import AddressResourceHandler
from address_book_service.services.address_service import AddressService

router = APIRouter(prefix="/addresses", tags=["addresses"])

FIELD_PREFIX = "address["


def get_address_handler(request: Request) -> AddressResourceHandler:
    """Build the resource handler around the application's store."""
    return AddressResourceHandler(AddressService(request.app.state.repository))


def nested_fields(form: Any, prefix: str = FIELD_PREFIX) -> Dict[str, Any]:
    """Collect ``address[name]``-style form keys into a plain dict."""
    return {
        key[len(prefix):-1]: value
        for key, value in form.items()
        if key.startswith(prefix) and key.endswith("]")
    }


@router.get("")
async def list_addresses(
    request: Request,
    handler: AddressResourceHandler = Depends(get_address_handler)
):
    """List all addresses."""
    return respond(request, await handler.list())


@router.post("")
async def create_address(
    request: Request,
    handler: AddressResourceHandler = Depends(get_address_handler)
):
    """Create an address from the submitted form."""
    form = await request.form()
    return respond(request, await handler.create(nested_fields(form)))


@router.get("/new")
async def new_address(
    request: Request,
    handler: AddressResourceHandler = Depends(get_address_handler)
):
    """Render the empty creation form."""
    return respond(request, await handler.new_form())


@router.delete("/{address_id}")
async def delete_address(
    address_id: int,
    request: Request,
    handler: AddressResourceHandler = Depends(get_address_handler)
):
    """Delete an address."""
    return respond(request, await handler.delete(address_id))


@router.post("/{address_id}")
async def override_address_method(
    address_id: int,
    request: Request,
    handler: AddressResourceHandler = Depends(get_address_handler)
):
    """HTML forms can only POST; ``_method=DELETE`` stands in for DELETE."""
    form = await request.form()
    if str(form.get("_method", "")).upper() != "DELETE":
        raise HTTPException(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            detail="Method Not Allowed"
        )
    return respond(request, await handler.delete(address_id))
