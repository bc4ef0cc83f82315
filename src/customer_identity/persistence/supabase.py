"""Customer persistence backed by Supabase (PostgREST over Postgres).

Tables and partial unique indexes are defined in ``sql/schema.sql``. Every
column is mapped in both directions, including status, audit timestamps,
deleted_at and address_type.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from postgrest.exceptions import APIError
from supabase import Client

from ..exceptions import CustomerNotFoundError, UniqueConstraintError
from ..models.domain import Address, AddressType, Customer, CustomerFields, CustomerStatus, Page
from .store import CustomerStore, check_sort_field

CUSTOMERS_TABLE = "customers"
ADDRESSES_TABLE = "addresses"

UNIQUE_VIOLATION = "23505"
RANGE_NOT_SATISFIABLE = "PGRST103"

logger = logging.getLogger(__name__)


class SupabaseCustomerStore(CustomerStore):
    backend = "supabase"

    def __init__(self, client: Client) -> None:
        self.client = client

    def list_active(
        self,
        page: int = 1,
        page_size: int = 20,
        sort_by: str = "id",
        descending: bool = False,
    ) -> Page:
        check_sort_field(sort_by)
        offset = (page - 1) * page_size
        try:
            response = (
                self.client.table(CUSTOMERS_TABLE)
                .select("*", count="exact")
                .is_("deleted_at", "null")
                .order(sort_by, desc=descending)
                .range(offset, offset + page_size - 1)
                .execute()
            )
        except APIError as exc:
            # PostgREST answers 416 for an offset past the last row
            if exc.code != RANGE_NOT_SATISFIABLE:
                raise
            return Page(items=[], page=page, page_size=page_size, total=self._count_active())
        rows = response.data or []
        addresses = self._addresses_by_customer([row["id"] for row in rows])
        items = [_row_to_customer(row, addresses.get(row["id"], [])) for row in rows]
        total = response.count if response.count is not None else len(rows)
        return Page(items=items, page=page, page_size=page_size, total=total)

    def get_active(self, customer_id: int) -> Customer:
        row = self._fetch_active_row(customer_id)
        return _row_to_customer(row, self.list_addresses(customer_id))

    def create(self, fields: CustomerFields) -> Customer:
        now = _now_iso()
        record = _fields_to_row(fields)
        record.update(
            {
                "status": CustomerStatus.PENDING_VERIFICATION.value,
                "created_at": now,
                "updated_at": now,
            }
        )
        try:
            response = self.client.table(CUSTOMERS_TABLE).insert(record).execute()
        except APIError as exc:
            if exc.code != UNIQUE_VIOLATION:
                raise
            raise _unique_violation(exc) from exc
        row = response.data[0]
        customer_id = row["id"]

        # parent row is committed; children reference its id
        try:
            addresses = self._insert_addresses(customer_id, fields.addresses)
        except APIError:
            logger.error("Address insert failed for new customer %s, removing parent row", customer_id)
            self.client.table(CUSTOMERS_TABLE).delete().eq("id", customer_id).execute()
            raise
        logger.info("Created customer %s", customer_id)
        return _row_to_customer(row, addresses)

    def update(self, customer_id: int, fields: CustomerFields) -> Customer:
        self._fetch_active_row(customer_id)
        record = _fields_to_row(fields)
        record["updated_at"] = _now_iso()
        try:
            response = (
                self.client.table(CUSTOMERS_TABLE)
                .update(record)
                .eq("id", customer_id)
                .is_("deleted_at", "null")
                .execute()
            )
        except APIError as exc:
            if exc.code != UNIQUE_VIOLATION:
                raise
            raise _unique_violation(exc) from exc
        if not response.data:
            # deleted between the existence check and the update
            raise CustomerNotFoundError(customer_id)

        self.client.table(ADDRESSES_TABLE).delete().eq("customer_id", customer_id).execute()
        addresses = self._insert_addresses(customer_id, fields.addresses)
        logger.info("Updated customer %s", customer_id)
        return _row_to_customer(response.data[0], addresses)

    def soft_delete(self, customer_id: int) -> None:
        response = (
            self.client.table(CUSTOMERS_TABLE)
            .update({"deleted_at": _now_iso()})
            .eq("id", customer_id)
            .is_("deleted_at", "null")
            .execute()
        )
        if not response.data:
            raise CustomerNotFoundError(customer_id)
        logger.info("Soft-deleted customer %s", customer_id)

    def list_addresses(self, customer_id: int) -> list[Address]:
        response = (
            self.client.table(ADDRESSES_TABLE)
            .select("*")
            .eq("customer_id", customer_id)
            .order("id")
            .execute()
        )
        return [_row_to_address(row) for row in response.data or []]

    def _count_active(self) -> int:
        response = (
            self.client.table(CUSTOMERS_TABLE)
            .select("id", count="exact")
            .is_("deleted_at", "null")
            .limit(1)
            .execute()
        )
        return response.count or 0

    def _fetch_active_row(self, customer_id: int) -> dict[str, Any]:
        response = (
            self.client.table(CUSTOMERS_TABLE)
            .select("*")
            .eq("id", customer_id)
            .is_("deleted_at", "null")
            .limit(1)
            .execute()
        )
        if not response.data:
            raise CustomerNotFoundError(customer_id)
        return response.data[0]

    def _insert_addresses(self, customer_id: int, addresses: Iterable[Address]) -> list[Address]:
        records = [_address_to_row(customer_id, address) for address in addresses]
        if not records:
            return []
        response = self.client.table(ADDRESSES_TABLE).insert(records).execute()
        return [_row_to_address(row) for row in response.data or []]

    def _addresses_by_customer(self, customer_ids: list[int]) -> dict[int, list[Address]]:
        if not customer_ids:
            return {}
        response = (
            self.client.table(ADDRESSES_TABLE)
            .select("*")
            .in_("customer_id", customer_ids)
            .order("id")
            .execute()
        )
        grouped: dict[int, list[Address]] = {}
        for row in response.data or []:
            grouped.setdefault(row["customer_id"], []).append(_row_to_address(row))
        return grouped


def _unique_violation(exc: APIError) -> UniqueConstraintError:
    text = " ".join(str(part) for part in (exc.message, exc.details) if part).lower()
    if "email" in text:
        return UniqueConstraintError("email")
    if "ssn" in text:
        return UniqueConstraintError("ssn")
    return UniqueConstraintError(None)


def _fields_to_row(fields: CustomerFields) -> dict[str, Any]:
    return {
        "first_name": fields.first_name,
        "last_name": fields.last_name,
        "email": fields.email,
        "ssn": fields.ssn,
        "phone": fields.phone,
    }


def _address_to_row(customer_id: int, address: Address) -> dict[str, Any]:
    return {
        "customer_id": customer_id,
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "zip_code": address.zip_code,
        "address_type": address.address_type.value,
    }


def _row_to_customer(row: dict[str, Any], addresses: list[Address]) -> Customer:
    return Customer(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        ssn=row["ssn"],
        phone=row.get("phone"),
        status=CustomerStatus(row["status"]),
        addresses=addresses,
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
        deleted_at=_parse_timestamp(row.get("deleted_at")),
    )


def _row_to_address(row: dict[str, Any]) -> Address:
    return Address(
        id=row["id"],
        customer_id=row["customer_id"],
        street=row["street"],
        city=row["city"],
        state=row["state"],
        zip_code=row["zip_code"],
        address_type=AddressType(row["address_type"]),
    )


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
