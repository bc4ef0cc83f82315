"""Login and per-request bearer token authentication."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..exceptions import InvalidCredentialsError, InvalidTokenError, UserNotFoundError
from ..models.domain import AuthenticatedPrincipal
from .passwords import verify_password
from .tokens import TokenCodec
from .users import UserDirectory

BEARER_PREFIX = "Bearer "

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoginResult:
    token: str
    username: str
    expires_in: int


class AuthenticationGate:
    """Issues tokens on login and turns Authorization headers into principals.

    Holds no per-request state: the directory is read-only and every request
    is authenticated from its own header.
    """

    def __init__(
        self,
        directory: UserDirectory,
        codec: TokenCodec,
        public_paths: Iterable[str] = (),
    ) -> None:
        self.directory = directory
        self.codec = codec
        self.public_paths = tuple(public_paths)

    def login(self, username: str, password: str) -> LoginResult:
        try:
            credential = self.directory.find_by_username(username)
        except UserNotFoundError:
            logger.warning("Authentication failed for user: %s", username)
            raise InvalidCredentialsError() from None

        if not credential.usable or not verify_password(password, credential.password_hash):
            logger.warning("Authentication failed for user: %s", username)
            raise InvalidCredentialsError()

        token = self.codec.issue_token(credential.username)
        logger.debug("Authentication successful for user: %s", username)
        return LoginResult(token=token, username=credential.username, expires_in=self.codec.ttl_seconds)

    def is_public(self, path: str) -> bool:
        for public in self.public_paths:
            if public == "/":
                if path == "/":
                    return True
            elif path == public or path.startswith(public.rstrip("/") + "/"):
                return True
        return False

    def authenticate(self, authorization: Optional[str]) -> Optional[AuthenticatedPrincipal]:
        """Resolve an Authorization header value to a principal.

        Returns None whenever the request should continue unauthenticated:
        missing or non-bearer header, unparseable token, unknown user, or a
        token that fails validation.
        """
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            logger.debug("Authorization header missing or doesn't start with Bearer")
            return None
        token = authorization[len(BEARER_PREFIX):].strip()

        try:
            username = self.codec.extract_username(token)
        except InvalidTokenError as exc:
            logger.warning("Unable to extract username from token: %s", exc.message)
            return None

        try:
            credential = self.directory.find_by_username(username)
        except UserNotFoundError:
            return None

        if not credential.usable:
            logger.warning("Token presented for disabled account: %s", username)
            return None

        outcome = self.codec.validate(token, credential)
        if not outcome.is_valid:
            logger.warning("Token validation failed for user %s: %s", username, outcome.status.value)
            return None

        logger.debug("Token authentication successful for user: %s", username)
        return outcome.principal
