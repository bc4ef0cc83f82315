"""Domain models."""

from .domain import (
    Address,
    AddressType,
    AuthenticatedPrincipal,
    Credential,
    Customer,
    CustomerFields,
    CustomerStatus,
    Order,
    Page,
)

__all__ = [
    "Address",
    "AddressType",
    "AuthenticatedPrincipal",
    "Credential",
    "Customer",
    "CustomerFields",
    "CustomerStatus",
    "Order",
    "Page",
]
