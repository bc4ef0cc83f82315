"""In-memory implementation of CustomerStore."""

from __future__ import annotations

import dataclasses
import itertools
import logging
import threading
from datetime import datetime, timezone

from ..exceptions import CustomerNotFoundError, UniqueConstraintError
from ..models.domain import Address, Customer, CustomerFields, CustomerStatus, Page
from .store import CustomerStore, check_sort_field

logger = logging.getLogger(__name__)


class InMemoryCustomerStore(CustomerStore):
    """In-memory implementation of CustomerStore for testing and development.

    Rows are kept in two tables keyed by id, mirroring the relational layout:
    customers, and addresses carrying a customer_id column.
    """

    backend = "memory"

    def __init__(self) -> None:
        self._customers: dict[int, Customer] = {}
        self._addresses: dict[int, Address] = {}
        self._customer_ids = itertools.count(1)
        self._address_ids = itertools.count(1)
        self._lock = threading.RLock()

    def list_active(
        self,
        page: int = 1,
        page_size: int = 20,
        sort_by: str = "id",
        descending: bool = False,
    ) -> Page:
        check_sort_field(sort_by)
        with self._lock:
            active = [row for row in self._customers.values() if row.deleted_at is None]
            active.sort(key=lambda row: getattr(row, sort_by), reverse=descending)
            offset = (page - 1) * page_size
            items = [self._hydrate(row) for row in active[offset:offset + page_size]]
            return Page(items=items, page=page, page_size=page_size, total=len(active))

    def get_active(self, customer_id: int) -> Customer:
        with self._lock:
            return self._hydrate(self._require_active(customer_id))

    def create(self, fields: CustomerFields) -> Customer:
        with self._lock:
            self._check_unique(fields.email, fields.ssn)
            now = _now()
            row = Customer(
                id=next(self._customer_ids),
                first_name=fields.first_name,
                last_name=fields.last_name,
                email=fields.email,
                ssn=fields.ssn,
                phone=fields.phone,
                status=CustomerStatus.PENDING_VERIFICATION,
                created_at=now,
                updated_at=now,
            )
            self._customers[row.id] = row
            self._insert_addresses(row.id, fields.addresses)
            logger.info("Created customer %s", row.id)
            return self._hydrate(row)

    def update(self, customer_id: int, fields: CustomerFields) -> Customer:
        with self._lock:
            row = self._require_active(customer_id)
            self._check_unique(fields.email, fields.ssn, exclude_id=customer_id)
            row.first_name = fields.first_name
            row.last_name = fields.last_name
            row.email = fields.email
            row.ssn = fields.ssn
            row.phone = fields.phone
            row.updated_at = _now()

            for address_id in [a.id for a in self._addresses.values() if a.customer_id == customer_id]:
                del self._addresses[address_id]
            self._insert_addresses(customer_id, fields.addresses)
            logger.info("Updated customer %s", customer_id)
            return self._hydrate(row)

    def soft_delete(self, customer_id: int) -> None:
        with self._lock:
            row = self._require_active(customer_id)
            row.deleted_at = _now()
            logger.info("Soft-deleted customer %s", customer_id)

    def list_addresses(self, customer_id: int) -> list[Address]:
        with self._lock:
            return [
                dataclasses.replace(address)
                for address in sorted(self._addresses.values(), key=lambda a: a.id)
                if address.customer_id == customer_id
            ]

    def _require_active(self, customer_id: int) -> Customer:
        row = self._customers.get(customer_id)
        if row is None or row.deleted_at is not None:
            raise CustomerNotFoundError(customer_id)
        return row

    def _check_unique(self, email: str, ssn: str, exclude_id: int | None = None) -> None:
        for row in self._customers.values():
            if row.deleted_at is not None or row.id == exclude_id:
                continue
            if row.email == email:
                raise UniqueConstraintError("email")
            if row.ssn == ssn:
                raise UniqueConstraintError("ssn")

    def _insert_addresses(self, customer_id: int, addresses: list[Address]) -> None:
        for address in addresses:
            stored = dataclasses.replace(address, id=next(self._address_ids), customer_id=customer_id)
            self._addresses[stored.id] = stored

    def _hydrate(self, row: Customer) -> Customer:
        # callers get copies so they cannot mutate stored rows
        return dataclasses.replace(row, addresses=self.list_addresses(row.id))


def _now() -> datetime:
    return datetime.now(timezone.utc)
