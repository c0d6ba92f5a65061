"""Data models for the address book service."""

from .schemas import (
    NAME_MAX_LENGTH,
    AddressFields,
    AddressRecord,
    RenderView,
    Redirect,
    HandlerOutcome,
    ErrorResponse,
    HealthCheckResponse,
)

__all__ = [
    "NAME_MAX_LENGTH",
    "AddressFields",
    "AddressRecord",
    "RenderView",
    "Redirect",
    "HandlerOutcome",
    "ErrorResponse",
    "HealthCheckResponse",
]
