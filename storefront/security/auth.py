"""
Shopper authentication

Resolves the bearer token on a request to a hosted-database user. Sign-in
itself happens against the hosted auth service; this module only checks the
resulting access token.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request

from ..services.supabase_client import (
    AuthUser,
    BackendError,
    SupabaseClient,
    get_supabase_client,
)

logger = logging.getLogger(__name__)


@dataclass
class ShopperSession:
    """Who is making the request"""
    user: Optional[AuthUser] = None
    access_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


def bearer_token(request: Request) -> Optional[str]:
    """Extract the bearer token from the Authorization header"""
    header = request.headers.get("Authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class AuthDependency:
    """
    FastAPI dependency resolving the shopper session.

    Guests get an empty session unless ``require_user`` is set, in which case
    the request is rejected with 401.
    """

    def __init__(self, require_user: bool = False):
        self.require_user = require_user

    async def __call__(
        self,
        request: Request,
        client: Optional[SupabaseClient] = Depends(get_supabase_client),
    ) -> ShopperSession:
        token = bearer_token(request)
        user = None

        if token and client:
            try:
                user = await client.get_user(token)
            except BackendError as e:
                logger.error(f"Could not verify access token: {e}")
                if self.require_user:
                    raise HTTPException(status_code=502, detail=e.message)

        if self.require_user and not client:
            raise HTTPException(status_code=503, detail="Hosted database not configured")

        if self.require_user and not user:
            raise HTTPException(status_code=401, detail="Not authenticated")

        if user:
            logger.debug(f"Authenticated shopper {user.id}")

        return ShopperSession(user=user, access_token=token if user else None)


# Dependency instances
optional_user = AuthDependency(require_user=False)
require_user = AuthDependency(require_user=True)
