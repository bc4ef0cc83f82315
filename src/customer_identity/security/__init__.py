"""Password hashing, bearer tokens and the authentication gate."""

from .gate import AuthenticationGate, LoginResult
from .passwords import hash_password, verify_password
from .tokens import TokenCodec, TokenStatus, TokenValidation
from .users import UserDirectory

__all__ = [
    "AuthenticationGate",
    "LoginResult",
    "TokenCodec",
    "TokenStatus",
    "TokenValidation",
    "UserDirectory",
    "hash_password",
    "verify_password",
]
