"""Pydantic models for the address book service."""

from datetime import datetime
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Longest name the addresses table accepts
NAME_MAX_LENGTH = 50


class AddressFields(BaseModel):
    """Fields accepted when creating an address.

    Both fields are optional; the only rule is the column length of ``name``.
    """

    name: Optional[str] = Field(
        default=None,
        description="Name of the person or place",
        max_length=NAME_MAX_LENGTH
    )
    street: Optional[str] = Field(
        default=None,
        description="Street address, free-form text"
    )


class AddressRecord(BaseModel):
    """Core model for stored addresses.

    ``id`` is ``None`` only for an address that has not been persisted yet,
    such as the blank one backing the creation form.
    """

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = Field(default=None, description="Surrogate key assigned by the store")
    name: Optional[str] = None
    street: Optional[str] = None


class RenderView(BaseModel):
    """Handler outcome: render the named template with ``data``."""

    kind: Literal["render"] = "render"
    name: str
    data: Dict[str, Any] = Field(default_factory=dict)


class Redirect(BaseModel):
    """Handler outcome: redirect the client to ``target``."""

    kind: Literal["redirect"] = "redirect"
    target: str


HandlerOutcome = Union[RenderView, Redirect]


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str = Field(..., description="Error type or code")
    message: str = Field(..., description="Human-readable error message")


class HealthCheckResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str = Field(..., description="Service status")
    storage_backend: str = Field(..., description="Configured storage backend")
    storage_connected: bool = Field(..., description="Storage connection status")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
