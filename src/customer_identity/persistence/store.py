"""CustomerStore abstract interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models.domain import Address, Customer, CustomerFields, Page

SORTABLE_FIELDS = ("id", "first_name", "last_name", "email", "created_at", "updated_at")


class CustomerStore(ABC):
    """Persistence of the customer aggregate and its owned addresses.

    Reads only ever see customers whose deleted_at is unset. Implementations
    raise CustomerNotFoundError for unknown or soft-deleted ids and
    UniqueConstraintError when email or ssn collide with another active
    customer.
    """

    backend: str = "abstract"

    @abstractmethod
    def list_active(
        self,
        page: int = 1,
        page_size: int = 20,
        sort_by: str = "id",
        descending: bool = False,
    ) -> Page:
        """Return one page of active customers with their addresses."""

    @abstractmethod
    def get_active(self, customer_id: int) -> Customer:
        """Return the active customer with ``customer_id``."""

    @abstractmethod
    def create(self, fields: CustomerFields) -> Customer:
        """Insert a customer, then its addresses under the new id.

        The new customer starts PENDING_VERIFICATION with created_at and
        updated_at set to the same instant.
        """

    @abstractmethod
    def update(self, customer_id: int, fields: CustomerFields) -> Customer:
        """Overwrite mutable fields and replace the whole address set."""

    @abstractmethod
    def soft_delete(self, customer_id: int) -> None:
        """Mark an active customer deleted. Address rows are left in place."""

    @abstractmethod
    def list_addresses(self, customer_id: int) -> list[Address]:
        """Return address rows stored for ``customer_id``, deleted owner or not."""


def check_sort_field(sort_by: str) -> str:
    if sort_by not in SORTABLE_FIELDS:
        raise ValueError(f"Unsupported sort field '{sort_by}'. Expected one of: {', '.join(SORTABLE_FIELDS)}")
    return sort_by
