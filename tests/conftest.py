from __future__ import annotations

import itertools
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from customer_identity.config import Settings
from customer_identity.exceptions import UpstreamUnavailableError
from customer_identity.main import create_app
from customer_identity.models.domain import Address, AddressType, CustomerFields, Order
from customer_identity.persistence.inmemory import InMemoryCustomerStore
from customer_identity.persistence.supabase import SupabaseCustomerStore
from customer_identity.security.tokens import TokenCodec
from customer_identity.security.users import UserDirectory

TEST_SECRET = "test-signing-secret-that-is-long-enough-0123456789"


class FakeOrderClient:
    """Stands in for OrderServiceClient; raises ``error`` when set."""

    def __init__(self, orders: list[Order] | None = None, error: Exception | None = None) -> None:
        self.orders = orders or []
        self.error = error
        self.calls: list[int] = []

    def get_orders_by_customer_id(self, customer_id: int) -> list[Order]:
        self.calls.append(customer_id)
        if self.error is not None:
            raise self.error
        return list(self.orders)

    def check_health(self) -> bool:
        return self.error is None

    def close(self) -> None:
        pass


class _Result:
    def __init__(self, data: list[dict], count: int | None = None) -> None:
        self.data = data
        self.count = count


class _Query:
    """Just enough of the PostgREST request builder for SupabaseCustomerStore."""

    def __init__(self, db: "FakeSupabaseClient", table: str) -> None:
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.window = None
        self.want_count = False

    def select(self, *columns, count=None):
        self.op = "select"
        self.want_count = count == "exact"
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def is_(self, column, value):
        assert value == "null"
        self.filters.append(lambda row: row.get(column) is None)
        return self

    def in_(self, column, values):
        allowed = set(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def range(self, start, end):
        self.window = (start, end + 1)
        return self

    def limit(self, size):
        self.window = (0, size)
        return self

    def execute(self) -> _Result:
        rows = self.db.tables.setdefault(self.table, [])
        self.db.statements.append((self.op, self.table))

        if self.op == "insert":
            if self.table in self.db.failing_tables:
                raise APIError({"code": "23502", "message": f"insert into {self.table} rejected"})
            records = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for record in records:
                row = {"deleted_at": None, **record, "id": next(self.db.ids[self.table])}
                self.db.check_unique(self.table, row)
                inserted.append(row)
            rows.extend(inserted)
            return _Result([dict(row) for row in inserted])

        matched = [row for row in rows if all(check(row) for check in self.filters)]
        if self.op == "update":
            for row in matched:
                self.db.check_unique(self.table, {**row, **self.payload})
            for row in matched:
                row.update(self.payload)
            return _Result([dict(row) for row in matched])
        if self.op == "delete":
            for row in matched:
                rows.remove(row)
            return _Result([dict(row) for row in matched])

        total = len(matched)
        if self.want_count and self.window and self.window[0] > total:
            raise APIError({"code": "PGRST103", "message": "Requested range not satisfiable"})
        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda row: row[column], reverse=desc)
        if self.window:
            matched = matched[self.window[0]:self.window[1]]
        return _Result([dict(row) for row in matched], total if self.want_count else None)


class FakeSupabaseClient:
    """In-process stand-in for supabase.Client with partial unique indexes on customers."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict]] = {"customers": [], "addresses": []}
        self.ids = {"customers": itertools.count(1), "addresses": itertools.count(1)}
        self.failing_tables: set[str] = set()
        self.statements: list[tuple[str, str]] = []

    def table(self, name: str) -> _Query:
        return _Query(self, name)

    def check_unique(self, table: str, candidate: dict) -> None:
        if table != "customers" or candidate.get("deleted_at") is not None:
            return
        for column in ("email", "ssn"):
            for row in self.tables["customers"]:
                if row["id"] == candidate.get("id") or row.get("deleted_at") is not None:
                    continue
                if row[column] == candidate[column]:
                    raise APIError(
                        {
                            "code": "23505",
                            "message": f'duplicate key value violates unique constraint "customers_{column}_active_key"',
                            "details": f"Key ({column})=({candidate[column]}) already exists.",
                        }
                    )


def make_fields(
    suffix: str = "1",
    addresses: list[Address] | None = None,
    **overrides,
) -> CustomerFields:
    values = dict(
        first_name=f"First{suffix}",
        last_name=f"Last{suffix}",
        email=f"customer{suffix}@example.com",
        ssn=f"123-45-{suffix.zfill(4)}",
        phone="555-0100",
        addresses=addresses if addresses is not None else [make_address("1 Main St")],
    )
    values.update(overrides)
    return CustomerFields(**values)


def make_address(street: str, address_type: AddressType = AddressType.HOME) -> Address:
    return Address(street=street, city="Springfield", state="IL", zip_code="62701", address_type=address_type)


def customer_payload(suffix: str = "1", **overrides) -> dict:
    payload = {
        "firstName": f"First{suffix}",
        "lastName": f"Last{suffix}",
        "email": f"customer{suffix}@example.com",
        "ssn": f"123-45-{suffix.zfill(4)}",
        "phone": "555-0100",
        "addresses": [
            {
                "street": "1 Main St",
                "city": "Springfield",
                "state": "IL",
                "zipCode": "62701",
                "addressType": "HOME",
            }
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture(scope="session")
def directory() -> UserDirectory:
    # low bcrypt cost keeps the suite fast
    return UserDirectory.with_demo_accounts(rounds=4)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        supabase_url=None,
        supabase_key=None,
        order_service_url=None,
    )


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET, ttl_seconds=3600)


@pytest.fixture
def memory_store() -> InMemoryCustomerStore:
    return InMemoryCustomerStore()


@pytest.fixture
def supabase_client() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture(params=["memory", "supabase"])
def store(request, supabase_client):
    if request.param == "memory":
        return InMemoryCustomerStore()
    return SupabaseCustomerStore(supabase_client)


@pytest.fixture
def order_client() -> FakeOrderClient:
    return FakeOrderClient(orders=[Order(order_id=7, amount=Decimal("19.99"), order_status="SHIPPED")])


@pytest.fixture
def api_client(test_settings, memory_store, order_client, directory) -> TestClient:
    app = create_app(test_settings, store=memory_store, order_client=order_client, directory=directory)
    return TestClient(app)


def login(client: TestClient, username: str = "admin", password: str = "admin123") -> dict[str, str]:
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def auth_headers(api_client) -> dict[str, str]:
    return login(api_client)


@pytest.fixture
def upstream_down() -> FakeOrderClient:
    return FakeOrderClient(error=UpstreamUnavailableError("timeout", "Order service timed out after 2.0s"))
