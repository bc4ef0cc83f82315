"""Customer record endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ...schemas.customers import CustomerPageResponse, CustomerRequest, CustomerResponse
from ..dependencies import CustomerServiceDep, require_principal

router = APIRouter(prefix="/customers", tags=["customers"], dependencies=[Depends(require_principal)])


@router.get("", response_model=CustomerPageResponse, status_code=status.HTTP_200_OK)
def list_customers(
    service: CustomerServiceDep,
    page: int = Query(default=1, description="1-based page index for pagination"),
    page_size: Optional[int] = Query(
        default=None, description="Maximum number of records per page; the configured default when omitted"
    ),
    sort_by: str = Query(default="id", description="Sort field"),
    direction: str = Query(default="asc", description="Sort direction: asc or desc"),
) -> CustomerPageResponse:
    return service.list_customers(page=page, page_size=page_size, sort_by=sort_by, direction=direction)


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(payload: CustomerRequest, service: CustomerServiceDep) -> CustomerResponse:
    return service.create_customer(payload)


@router.get("/{customer_id}", response_model=CustomerResponse, status_code=status.HTTP_200_OK)
def get_customer(service: CustomerServiceDep, customer_id: int) -> CustomerResponse:
    return service.get_customer(customer_id)


@router.put("/{customer_id}", response_model=CustomerResponse, status_code=status.HTTP_200_OK)
def update_customer(
    payload: CustomerRequest, service: CustomerServiceDep, customer_id: int
) -> CustomerResponse:
    return service.update_customer(customer_id, payload)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_customer(service: CustomerServiceDep, customer_id: int) -> Response:
    """Soft delete: the record disappears from reads but is not removed."""
    service.delete_customer(customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
