"""Behaviour shared by every CustomerStore backend."""

import pytest

from customer_identity.exceptions import CustomerNotFoundError, UniqueConstraintError
from customer_identity.models.domain import AddressType, CustomerStatus

from conftest import make_address, make_fields


def test_create_assigns_id_status_and_timestamps(store) -> None:
    customer = store.create(make_fields("1"))

    assert customer.id is not None
    assert customer.status is CustomerStatus.PENDING_VERIFICATION
    assert customer.created_at is not None
    assert customer.created_at == customer.updated_at
    assert customer.deleted_at is None
    assert [a.street for a in customer.addresses] == ["1 Main St"]
    assert all(a.customer_id == customer.id and a.id is not None for a in customer.addresses)


def test_get_active_round_trips_every_field(store) -> None:
    created = store.create(
        make_fields("2", addresses=[make_address("9 Elm St", AddressType.BILLING)], phone=None)
    )

    fetched = store.get_active(created.id)

    assert fetched.first_name == "First2"
    assert fetched.email == "customer2@example.com"
    assert fetched.ssn == "123-45-0002"
    assert fetched.phone is None
    assert fetched.status is CustomerStatus.PENDING_VERIFICATION
    assert fetched.created_at == created.created_at
    assert fetched.addresses[0].address_type is AddressType.BILLING
    assert fetched.addresses[0].zip_code == "62701"


def test_unknown_id_is_not_found(store) -> None:
    with pytest.raises(CustomerNotFoundError):
        store.get_active(999)
    with pytest.raises(CustomerNotFoundError):
        store.update(999, make_fields("9"))
    with pytest.raises(CustomerNotFoundError):
        store.soft_delete(999)


def test_duplicate_email_or_ssn_of_active_customer_conflicts(store) -> None:
    store.create(make_fields("1"))

    with pytest.raises(UniqueConstraintError) as email_conflict:
        store.create(make_fields("2", email="customer1@example.com"))
    with pytest.raises(UniqueConstraintError) as ssn_conflict:
        store.create(make_fields("3", ssn="123-45-0001"))

    assert email_conflict.value.field == "email"
    assert email_conflict.value.details == ["Email address already exists."]
    assert ssn_conflict.value.field == "ssn"
    assert ssn_conflict.value.details == ["SSN already exists."]
    assert store.list_active().total == 1


def test_soft_deleted_customer_releases_email_and_ssn(store) -> None:
    original = store.create(make_fields("1"))
    store.soft_delete(original.id)

    replacement = store.create(make_fields("1"))

    assert replacement.id != original.id
    assert store.get_active(replacement.id).email == "customer1@example.com"


def test_soft_delete_hides_customer_but_keeps_address_rows(store) -> None:
    customer = store.create(make_fields("1", addresses=[make_address("A"), make_address("B")]))

    store.soft_delete(customer.id)

    with pytest.raises(CustomerNotFoundError):
        store.get_active(customer.id)
    with pytest.raises(CustomerNotFoundError):
        store.soft_delete(customer.id)
    assert store.list_active().total == 0
    assert [a.street for a in store.list_addresses(customer.id)] == ["A", "B"]


def test_update_replaces_fields_and_entire_address_set(store) -> None:
    customer = store.create(make_fields("1", addresses=[make_address("A"), make_address("B")]))
    old_ids = {a.id for a in customer.addresses}

    updated = store.update(
        customer.id,
        make_fields("1", first_name="Renamed", addresses=[make_address("C", AddressType.SHIPPING)]),
    )

    assert updated.first_name == "Renamed"
    assert updated.created_at == customer.created_at
    assert updated.updated_at >= customer.updated_at
    assert [a.street for a in updated.addresses] == ["C"]
    assert updated.addresses[0].id not in old_ids
    assert [a.street for a in store.get_active(customer.id).addresses] == ["C"]
    assert [a.street for a in store.list_addresses(customer.id)] == ["C"]


def test_update_may_keep_own_email_but_not_take_anothers(store) -> None:
    first = store.create(make_fields("1"))
    store.create(make_fields("2"))

    store.update(first.id, make_fields("1", phone="555-0199"))
    with pytest.raises(UniqueConstraintError):
        store.update(first.id, make_fields("1", email="customer2@example.com"))

    assert store.get_active(first.id).email == "customer1@example.com"


def test_update_with_no_addresses_clears_them(store) -> None:
    customer = store.create(make_fields("1"))

    updated = store.update(customer.id, make_fields("1", addresses=[]))

    assert updated.addresses == []
    assert store.list_addresses(customer.id) == []


def test_list_active_paginates_and_sorts(store) -> None:
    for index in range(1, 6):
        store.create(make_fields(str(index), last_name=f"Name{6 - index}"))
    deleted = store.create(make_fields("6"))
    store.soft_delete(deleted.id)

    first_page = store.list_active(page=1, page_size=2)
    last_page = store.list_active(page=3, page_size=2)
    by_last_name = store.list_active(page=1, page_size=5, sort_by="last_name")
    descending = store.list_active(page=1, page_size=5, sort_by="id", descending=True)

    assert first_page.total == 5
    assert [c.first_name for c in first_page.items] == ["First1", "First2"]
    assert first_page.has_next_page
    assert [c.first_name for c in last_page.items] == ["First5"]
    assert not last_page.has_next_page
    assert [c.last_name for c in by_last_name.items] == ["Name1", "Name2", "Name3", "Name4", "Name5"]
    assert [c.first_name for c in descending.items][0] == "First5"
    assert all(c.addresses for c in first_page.items)


def test_list_active_past_the_last_page_is_empty(store) -> None:
    store.create(make_fields("1"))
    store.create(make_fields("2"))

    page = store.list_active(page=5, page_size=2)

    assert page.items == []
    assert page.total == 2
    assert not page.has_next_page


def test_list_active_rejects_unknown_sort_field(store) -> None:
    with pytest.raises(ValueError):
        store.list_active(sort_by="ssn")


def test_returned_customers_are_detached_copies(memory_store) -> None:
    customer = memory_store.create(make_fields("1"))
    customer.first_name = "Mutated"
    customer.addresses.clear()

    fetched = memory_store.get_active(customer.id)

    assert fetched.first_name == "First1"
    assert len(fetched.addresses) == 1
