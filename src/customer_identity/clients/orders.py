"""HTTP client for the order service."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

import httpx

from ..exceptions import UpstreamUnavailableError
from ..models.domain import Order

DEFAULT_TIMEOUT_SECONDS = 2.0

logger = logging.getLogger(__name__)


class OrderServiceClient:
    """Read-only lookup of orders by customer id.

    Each call is bounded by ``timeout`` and made exactly once; every failure
    is raised as UpstreamUnavailableError with a ``kind`` of ``timeout``,
    ``connection``, ``status`` or ``payload``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("Order service base URL is not configured.")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    def get_orders_by_customer_id(self, customer_id: int) -> list[Order]:
        try:
            response = self._client.get(f"/orders/customer/{customer_id}")
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as e:
            raise UpstreamUnavailableError("timeout", f"Order service timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise UpstreamUnavailableError(
                "status", f"Order service answered {e.response.status_code}"
            ) from e
        except (httpx.ConnectError, httpx.NetworkError) as e:
            raise UpstreamUnavailableError("connection", f"Order service unreachable at {self.base_url}: {e}") from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError("connection", f"Order service request failed: {e}") from e
        except ValueError as e:
            raise UpstreamUnavailableError("payload", "Order service returned invalid JSON") from e

        return _parse_orders(payload)

    def check_health(self) -> bool:
        try:
            response = self._client.get("/actuator/health")
            return response.status_code < 500
        except httpx.HTTPError as e:
            logger.debug(f"Order service health check failed: {e}")
            return False

    def close(self) -> None:
        self._client.close()


def _parse_orders(payload: object) -> list[Order]:
    if not isinstance(payload, list):
        raise UpstreamUnavailableError("payload", "Order service response is not a list")
    orders: list[Order] = []
    try:
        for item in payload:
            orders.append(
                Order(
                    order_id=int(item["orderId"]),
                    amount=Decimal(str(item["amount"])),
                    order_status=str(item["orderStatus"]),
                )
            )
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise UpstreamUnavailableError("payload", f"Malformed order record: {e}") from e
    return orders
