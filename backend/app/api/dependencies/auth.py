# backend/app/api/dependencies/auth.py
"""
Authentication dependencies.

Every booking endpoint requires a bearer token issued by the identity
provider. Missing or invalid tokens become a 401 before any other work.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...auth import IdentityProvider, get_identity_provider
from ...core.exceptions import UnauthorizedException

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> str:
    """
    Resolve the caller's user id from the Authorization header.

    Raises:
        UnauthorizedException: No bearer token, or the provider rejects it
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException()
    user_id = identity_provider.resolve(credentials.credentials)
    if user_id is None:
        raise UnauthorizedException("Invalid or expired access token")
    return user_id
