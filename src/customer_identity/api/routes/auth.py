"""Authentication endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

from ...schemas.auth import LoginRequest, LoginResponse
from ..dependencies import AuthenticationGateDep, PrincipalDep

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
def login(payload: LoginRequest, gate: AuthenticationGateDep) -> LoginResponse:
    result = gate.login(payload.username, payload.password)
    return LoginResponse(token=result.token, username=result.username, expiresIn=result.expires_in)


@router.post("/validate", response_class=PlainTextResponse, status_code=status.HTTP_200_OK)
def validate_token(principal: PrincipalDep) -> str:
    """Confirm the bearer token on this request belongs to a known user."""
    return f"Token is valid for user: {principal.username}"
