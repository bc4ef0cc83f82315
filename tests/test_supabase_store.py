import pytest
from postgrest.exceptions import APIError

from customer_identity.exceptions import UniqueConstraintError
from customer_identity.persistence.supabase import SupabaseCustomerStore, _unique_violation

from conftest import make_address, make_fields


def test_create_writes_parent_before_children(supabase_client) -> None:
    store = SupabaseCustomerStore(supabase_client)

    customer = store.create(make_fields("1", addresses=[make_address("A"), make_address("B")]))

    writes = [entry for entry in supabase_client.statements if entry[0] == "insert"]
    assert writes == [("insert", "customers"), ("insert", "addresses")]
    rows = supabase_client.tables["addresses"]
    assert {row["customer_id"] for row in rows} == {customer.id}
    assert supabase_client.tables["customers"][0]["status"] == "PENDING_VERIFICATION"


def test_failed_address_insert_removes_new_parent_row(supabase_client) -> None:
    store = SupabaseCustomerStore(supabase_client)
    supabase_client.failing_tables.add("addresses")

    with pytest.raises(APIError):
        store.create(make_fields("1"))

    assert supabase_client.tables["customers"] == []
    assert supabase_client.tables["addresses"] == []


def test_create_without_addresses_skips_child_insert(supabase_client) -> None:
    store = SupabaseCustomerStore(supabase_client)

    store.create(make_fields("1", addresses=[]))

    assert ("insert", "addresses") not in supabase_client.statements


def test_soft_delete_only_stamps_deleted_at(supabase_client) -> None:
    store = SupabaseCustomerStore(supabase_client)
    customer = store.create(make_fields("1"))

    store.soft_delete(customer.id)

    row = supabase_client.tables["customers"][0]
    assert row["deleted_at"] is not None
    assert len(supabase_client.tables["addresses"]) == 1
    assert ("delete", "customers") not in supabase_client.statements


@pytest.mark.parametrize(
    "error,field",
    [
        ({"code": "23505", "message": 'duplicate key value violates unique constraint "customers_email_active_key"'}, "email"),
        ({"code": "23505", "message": "duplicate key", "details": "Key (ssn)=(1) already exists."}, "ssn"),
        ({"code": "23505", "message": "duplicate key value"}, None),
    ],
)
def test_unique_violations_name_the_field(error, field) -> None:
    translated = _unique_violation(APIError(error))

    assert isinstance(translated, UniqueConstraintError)
    assert translated.field == field


def test_other_database_errors_are_reraised_unchanged(supabase_client) -> None:
    store = SupabaseCustomerStore(supabase_client)
    supabase_client.failing_tables.add("customers")

    with pytest.raises(APIError) as excinfo:
        store.create(make_fields("1"))

    assert excinfo.value.code == "23502"
    assert excinfo.value.__cause__ is None


def test_page_past_the_end_is_empty_not_an_error(supabase_client) -> None:
    store = SupabaseCustomerStore(supabase_client)
    store.create(make_fields("1"))
    store.create(make_fields("2"))

    page = store.list_active(page=4, page_size=1)

    assert page.items == []
    assert page.total == 2
    assert not page.has_next_page
