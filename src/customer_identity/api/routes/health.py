"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root(request: Request) -> dict:
    """Simple health check endpoint that doesn't touch downstream services."""
    return {"status": "ok", "store": request.app.state.customer_service.store.backend}


@router.get("/health/orders", status_code=status.HTTP_200_OK)
def health_orders(request: Request) -> dict:
    """Check order service reachability."""
    client = request.app.state.customer_service.order_client
    if client is None:
        return {"service": "orders", "configured": False, "healthy": False}
    return {"service": "orders", "configured": True, "healthy": client.check_health()}
