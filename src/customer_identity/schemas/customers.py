"""Customer-facing API schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, List

from pydantic import AfterValidator, BaseModel, EmailStr, Field

from ..models.domain import Address, AddressType, Customer, CustomerFields, CustomerStatus, Order


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value.strip()


NonBlankStr = Annotated[str, AfterValidator(_not_blank)]


class AddressRequest(BaseModel):
    street: NonBlankStr
    city: NonBlankStr
    state: NonBlankStr
    zipCode: NonBlankStr
    addressType: AddressType

    def to_domain(self) -> Address:
        return Address(
            street=self.street,
            city=self.city,
            state=self.state,
            zip_code=self.zipCode,
            address_type=self.addressType,
        )


class CustomerRequest(BaseModel):
    firstName: NonBlankStr
    lastName: NonBlankStr
    email: EmailStr
    ssn: NonBlankStr
    phone: str | None = None
    addresses: List[AddressRequest] = Field(default_factory=list)

    def to_domain(self) -> CustomerFields:
        return CustomerFields(
            first_name=self.firstName,
            last_name=self.lastName,
            email=self.email,
            ssn=self.ssn,
            phone=self.phone,
            addresses=[address.to_domain() for address in self.addresses],
        )


class AddressResponse(BaseModel):
    id: int
    street: str
    city: str
    state: str
    zipCode: str
    addressType: AddressType

    @classmethod
    def from_domain(cls, address: Address) -> "AddressResponse":
        return cls(
            id=address.id,
            street=address.street,
            city=address.city,
            state=address.state,
            zipCode=address.zip_code,
            addressType=address.address_type,
        )


class OrderModel(BaseModel):
    orderId: int
    amount: Decimal
    orderStatus: str

    @classmethod
    def from_domain(cls, order: Order) -> "OrderModel":
        return cls(orderId=order.order_id, amount=order.amount, orderStatus=order.order_status)


class CustomerResponse(BaseModel):
    id: int
    firstName: str
    lastName: str
    email: str
    ssn: str
    phone: str | None = None
    status: CustomerStatus
    createdAt: datetime | None = None
    updatedAt: datetime | None = None
    addresses: List[AddressResponse]
    orders: List[OrderModel] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, customer: Customer, orders: list[Order] | None = None) -> "CustomerResponse":
        return cls(
            id=customer.id,
            firstName=customer.first_name,
            lastName=customer.last_name,
            email=customer.email,
            ssn=customer.ssn,
            phone=customer.phone,
            status=customer.status,
            createdAt=customer.created_at,
            updatedAt=customer.updated_at,
            addresses=[AddressResponse.from_domain(address) for address in customer.addresses],
            orders=[OrderModel.from_domain(order) for order in orders or []],
        )


class CustomerPageResponse(BaseModel):
    items: List[CustomerResponse]
    page: int
    page_size: int
    total: int
    has_next_page: bool
