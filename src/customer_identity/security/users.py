"""Fixed in-memory user directory."""

from __future__ import annotations

import dataclasses
import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from ..exceptions import UserNotFoundError
from ..models.domain import Credential
from .passwords import DEFAULT_ROUNDS, hash_password

logger = logging.getLogger(__name__)

ROLE_ADMIN = "ROLE_ADMIN"
ROLE_USER = "ROLE_USER"

# username -> (plaintext password, roles); hashed once when the directory is built
DEMO_ACCOUNTS: Mapping[str, tuple[str, frozenset[str]]] = MappingProxyType(
    {
        "admin": ("admin123", frozenset({ROLE_ADMIN, ROLE_USER})),
        "user": ("password", frozenset({ROLE_USER})),
        "demo": ("demo123", frozenset({ROLE_USER})),
    }
)


class UserDirectory:
    """Read-only username -> credential lookup built once at process start."""

    def __init__(self, credentials: Iterable[Credential]) -> None:
        table = {credential.username: credential for credential in credentials}
        self._credentials: Mapping[str, Credential] = MappingProxyType(table)
        logger.info("Initialized user directory with %d accounts", len(table))

    @classmethod
    def with_demo_accounts(cls, rounds: int = DEFAULT_ROUNDS) -> "UserDirectory":
        return cls(
            Credential(username=username, password_hash=hash_password(password, rounds), roles=roles)
            for username, (password, roles) in DEMO_ACCOUNTS.items()
        )

    def find_by_username(self, username: str) -> Credential:
        """Exact, case-sensitive lookup returning a copy of the stored record."""
        template = self._credentials.get(username)
        if template is None:
            logger.warning("User not found: %s", username)
            raise UserNotFoundError(username)
        return dataclasses.replace(template)

    def usernames(self) -> list[str]:
        return sorted(self._credentials)

    def __len__(self) -> int:
        return len(self._credentials)
