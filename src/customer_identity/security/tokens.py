"""Signed bearer token issuance and validation (JWT via python-jose)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWSSignatureError, JWTClaimsError

from ..exceptions import InvalidTokenError
from ..models.domain import AuthenticatedPrincipal, Credential

logger = logging.getLogger(__name__)


class TokenStatus(str, Enum):
    VALID = "valid"
    EXPIRED = "expired"
    MALFORMED = "malformed"
    SIGNATURE_MISMATCH = "signature_mismatch"
    USERNAME_MISMATCH = "username_mismatch"


@dataclass(frozen=True, slots=True)
class TokenValidation:
    """Outcome of validating a token against an expected credential."""

    status: TokenStatus
    principal: Optional[AuthenticatedPrincipal] = None

    @property
    def is_valid(self) -> bool:
        return self.status is TokenStatus.VALID


class TokenCodec:
    def __init__(self, secret: str, algorithm: str = "HS256", ttl_seconds: int = 3600) -> None:
        if not secret:
            raise ValueError("Token secret is not configured.")
        self.secret = secret
        self.algorithm = algorithm
        self.ttl_seconds = ttl_seconds

    def issue_token(self, username: str, ttl_seconds: int | None = None) -> str:
        now = datetime.now(timezone.utc)
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        claims = {
            "sub": username,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=ttl)).timestamp()),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def extract_username(self, token: str) -> str:
        """Read the subject claim without checking signature or expiry."""
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise InvalidTokenError("Malformed token") from exc
        username = claims.get("sub")
        if not isinstance(username, str) or not username:
            raise InvalidTokenError("Token has no subject")
        return username

    def validate(self, token: str, credential: Credential) -> TokenValidation:
        """Check signature, expiry and subject of ``token`` against ``credential``."""
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            return TokenValidation(TokenStatus.EXPIRED)
        except JWTClaimsError:
            return TokenValidation(TokenStatus.MALFORMED)
        except JWTError as exc:
            # jose wraps both bad signatures and unparseable input in JWTError
            if _is_signature_error(exc):
                return TokenValidation(TokenStatus.SIGNATURE_MISMATCH)
            return TokenValidation(TokenStatus.MALFORMED)

        if claims.get("sub") != credential.username:
            return TokenValidation(TokenStatus.USERNAME_MISMATCH)
        expiry = claims.get("exp")
        if not isinstance(expiry, (int, float)):
            return TokenValidation(TokenStatus.MALFORMED)

        principal = AuthenticatedPrincipal(
            username=credential.username,
            roles=frozenset(credential.roles),
            expires_at=datetime.fromtimestamp(expiry, tz=timezone.utc),
        )
        return TokenValidation(TokenStatus.VALID, principal)


def _is_signature_error(exc: BaseException) -> bool:
    """Look for JWSSignatureError among the exceptions jose chained beneath ``exc``."""
    seen = exc
    while seen is not None:
        if isinstance(seen, JWSSignatureError):
            return True
        seen = seen.__cause__ or seen.__context__
    return False
