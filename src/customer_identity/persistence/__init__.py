"""Customer aggregate persistence backends."""

from .inmemory import InMemoryCustomerStore
from .store import SORTABLE_FIELDS, CustomerStore

__all__ = ["CustomerStore", "InMemoryCustomerStore", "SORTABLE_FIELDS"]
