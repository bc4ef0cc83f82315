"""FastAPI dependencies for services and the authorization policy."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from ..models.domain import AuthenticatedPrincipal
from ..security.gate import AuthenticationGate
from ..services.customers import CustomerService


def get_customer_service(request: Request) -> CustomerService:
    return request.app.state.customer_service


def get_authentication_gate(request: Request) -> AuthenticationGate:
    return request.app.state.authentication_gate


def require_principal(request: Request) -> AuthenticatedPrincipal:
    """Reject requests that reached the endpoint without an authenticated principal."""
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Full authentication is required to access this resource",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


CustomerServiceDep = Annotated[CustomerService, Depends(get_customer_service)]
AuthenticationGateDep = Annotated[AuthenticationGate, Depends(get_authentication_gate)]
PrincipalDep = Annotated[AuthenticatedPrincipal, Depends(require_principal)]
