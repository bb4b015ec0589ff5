"""Caller identity for audit stamps.

The mock does not authenticate. Bearer tokens are accepted but never
checked; the ``X-User`` header names the caller recorded as
createdBy/updatedBy.
"""

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from patientmock.config import settings

bearer_scheme = HTTPBearer(auto_error=False)


async def get_identity(
    x_user: str | None = Header(default=None, alias="X-User"),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Resolve the caller identity.

    ``credentials`` is never read; depending on the bearer scheme only
    declares it in the OpenAPI schema.

    Returns:
        The ``X-User`` header value, or the configured default identity.
    """
    if x_user and x_user.strip():
        return x_user.strip()
    return settings.default_identity
