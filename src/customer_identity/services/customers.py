"""Customer application service."""

from __future__ import annotations

import logging
from typing import Optional

from ..clients.orders import OrderServiceClient
from ..exceptions import UpstreamUnavailableError, ValidationFailedError
from ..models.domain import Order
from ..persistence.store import SORTABLE_FIELDS, CustomerStore
from ..schemas.customers import CustomerPageResponse, CustomerRequest, CustomerResponse

logger = logging.getLogger(__name__)


class CustomerService:
    """Glue between the HTTP layer, the customer store and the order service."""

    def __init__(
        self,
        store: CustomerStore,
        order_client: Optional[OrderServiceClient] = None,
        default_page_size: int = 20,
        max_page_size: int = 100,
    ) -> None:
        self.store = store
        self.order_client = order_client
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def create_customer(self, request: CustomerRequest) -> CustomerResponse:
        customer = self.store.create(request.to_domain())
        return CustomerResponse.from_domain(customer)

    def get_customer(self, customer_id: int) -> CustomerResponse:
        customer = self.store.get_active(customer_id)
        return CustomerResponse.from_domain(customer, self._fetch_orders(customer_id))

    def update_customer(self, customer_id: int, request: CustomerRequest) -> CustomerResponse:
        customer = self.store.update(customer_id, request.to_domain())
        return CustomerResponse.from_domain(customer)

    def delete_customer(self, customer_id: int) -> None:
        self.store.soft_delete(customer_id)

    def list_customers(
        self,
        page: int = 1,
        page_size: Optional[int] = None,
        sort_by: str = "id",
        direction: str = "asc",
    ) -> CustomerPageResponse:
        if page_size is None:
            page_size = self.default_page_size
        problems = []
        if page < 1:
            problems.append("page: must be greater than or equal to 1")
        if not 1 <= page_size <= self.max_page_size:
            problems.append(f"page_size: must be between 1 and {self.max_page_size}")
        if sort_by not in SORTABLE_FIELDS:
            problems.append(f"sort_by: must be one of {', '.join(SORTABLE_FIELDS)}")
        if direction not in ("asc", "desc"):
            problems.append("direction: must be 'asc' or 'desc'")
        if problems:
            raise ValidationFailedError(problems)

        result = self.store.list_active(page=page, page_size=page_size, sort_by=sort_by, descending=direction == "desc")
        return CustomerPageResponse(
            items=[CustomerResponse.from_domain(customer) for customer in result.items],
            page=result.page,
            page_size=result.page_size,
            total=result.total,
            has_next_page=result.has_next_page,
        )

    def _fetch_orders(self, customer_id: int) -> list[Order]:
        if self.order_client is None:
            return []
        try:
            return self.order_client.get_orders_by_customer_id(customer_id)
        except UpstreamUnavailableError as exc:
            logger.warning(
                "Order enrichment skipped for customer %s (%s): %s", customer_id, exc.kind, exc.message
            )
            return []
