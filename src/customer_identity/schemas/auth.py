"""Authentication API schemas."""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, BaseModel


def _not_blank(value: str) -> str:
    # credentials are compared verbatim, so nothing is stripped
    if not value.strip():
        raise ValueError("must not be blank")
    return value


CredentialStr = Annotated[str, AfterValidator(_not_blank)]


class LoginRequest(BaseModel):
    username: CredentialStr
    password: CredentialStr


class LoginResponse(BaseModel):
    token: str
    type: str = "Bearer"
    username: str
    expiresIn: int
