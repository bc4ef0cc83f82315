"""Domain models for customers, addresses and authenticated users."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class CustomerStatus(str, Enum):
    PENDING_VERIFICATION = "PENDING_VERIFICATION"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    INACTIVE = "INACTIVE"
    CLOSED = "CLOSED"


class AddressType(str, Enum):
    HOME = "HOME"
    BILLING = "BILLING"
    SHIPPING = "SHIPPING"
    WORK = "WORK"


@dataclass(slots=True)
class Address:
    """A postal address owned by exactly one customer.

    The owner is referenced by plain id only; a customer holds its addresses,
    an address never holds its customer.
    """

    street: str
    city: str
    state: str
    zip_code: str
    address_type: AddressType
    id: Optional[int] = None
    customer_id: Optional[int] = None


@dataclass(slots=True)
class Customer:
    """Customer aggregate root together with its owned addresses."""

    first_name: str
    last_name: str
    email: str
    ssn: str
    phone: Optional[str] = None
    status: CustomerStatus = CustomerStatus.PENDING_VERIFICATION
    addresses: list[Address] = field(default_factory=list)
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass(slots=True)
class CustomerFields:
    """Mutable customer fields accepted on create and full update."""

    first_name: str
    last_name: str
    email: str
    ssn: str
    phone: Optional[str] = None
    addresses: list[Address] = field(default_factory=list)


@dataclass(slots=True)
class Order:
    """Order summary returned by the order service."""

    order_id: int
    amount: Decimal
    order_status: str


@dataclass(slots=True)
class Credential:
    """Stored account record of the user directory."""

    username: str
    password_hash: str
    roles: frozenset[str]
    enabled: bool = True
    account_non_locked: bool = True
    account_non_expired: bool = True
    credentials_non_expired: bool = True

    @property
    def usable(self) -> bool:
        return (
            self.enabled
            and self.account_non_locked
            and self.account_non_expired
            and self.credentials_non_expired
        )


@dataclass(frozen=True, slots=True)
class AuthenticatedPrincipal:
    """Identity attached to a single request after its bearer token validated."""

    username: str
    roles: frozenset[str]
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class Page:
    items: list[Customer]
    page: int
    page_size: int
    total: int

    @property
    def has_next_page(self) -> bool:
        return self.page * self.page_size < self.total
