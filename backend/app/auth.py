"""
Identity provider integration.

Sign-in happens at an external identity service that issues JWT access
tokens. This API only verifies them: a valid token's ``sub`` claim is the
user id stored on reservations.
"""

from functools import lru_cache
import logging
from typing import Any, Dict, Optional, Protocol, cast

import jwt
from jwt import PyJWTError

from .core.config import settings

logger = logging.getLogger(__name__)


def _secret_value(secret_obj: Any) -> str:
    getter = getattr(secret_obj, "get_secret_value", None)
    if callable(getter):
        return cast(str, getter())
    return cast(str, secret_obj)


class IdentityProvider(Protocol):
    def resolve(self, token: str) -> Optional[str]:
        """Return the user id a token identifies, or None when it is not valid."""


class JWTIdentityProvider:
    """Verifies access tokens signed with a shared secret (HS256 by default)."""

    def __init__(self, secret: Any, algorithm: str = "HS256", audience: Optional[str] = None):
        self._secret = _secret_value(secret)
        self.algorithm = algorithm
        self.audience = audience

    def decode(self, token: str) -> Dict[str, Any]:
        """Decode and verify a token; raises ``PyJWTError`` when invalid."""
        options: Dict[str, Any] = {"require": ["exp", "sub"]}
        if self.audience is None:
            options["verify_aud"] = False
        payload = jwt.decode(
            token,
            self._secret,
            algorithms=[self.algorithm],
            audience=self.audience,
            options=options,
        )
        return cast(Dict[str, Any], payload)

    def resolve(self, token: str) -> Optional[str]:
        try:
            payload = self.decode(token)
        except PyJWTError as exc:
            logger.info(f"Rejected access token: {exc}")
            return None
        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject.strip():
            return None
        return subject


@lru_cache(maxsize=1)
def get_identity_provider() -> IdentityProvider:
    """Identity provider configured from settings; override this dependency in tests."""
    return JWTIdentityProvider(
        settings.identity_jwt_secret,
        algorithm=settings.identity_jwt_algorithm,
        audience=settings.identity_jwt_audience,
    )
