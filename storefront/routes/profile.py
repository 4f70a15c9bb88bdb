"""Profile API routes for the storefront"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends

from ..models.checkout import Order
from ..models.profile import Profile, ProfileResponse, UpdateProfileRequest
from ..services.supabase_client import BackendError, SupabaseClient, get_supabase_client
from ..security.auth import ShopperSession, require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile", tags=["Profile"])

PROFILES_TABLE = "profiles"
ORDERS_TABLE = "orders"


def _client(client: Optional[SupabaseClient]) -> SupabaseClient:
    if not client:
        raise HTTPException(status_code=503, detail="Hosted database not configured")
    return client


@router.get("", response_model=ProfileResponse)
async def get_profile(
    session: ShopperSession = Depends(require_user),
    client: Optional[SupabaseClient] = Depends(get_supabase_client),
):
    """Get the signed-in shopper's profile"""
    user = session.user
    profile = Profile(id=user.id, email=user.email or "")

    try:
        row = await _client(client).select_one(
            PROFILES_TABLE, {"id": user.id}, access_token=session.access_token
        )
    except BackendError as e:
        logger.error(f"Error fetching profile for {user.id}: {e}")
        row = None

    if row:
        profile = Profile(
            id=user.id,
            first_name=row.get("first_name") or "",
            last_name=row.get("last_name") or "",
            email=user.email or row.get("email") or "",
            phone=row.get("phone") or "",
        )

    return ProfileResponse(profile=profile)


@router.put("", response_model=ProfileResponse)
async def update_profile(
    request: UpdateProfileRequest,
    session: ShopperSession = Depends(require_user),
    client: Optional[SupabaseClient] = Depends(get_supabase_client),
):
    """Update name and phone on the signed-in shopper's profile"""
    user = session.user
    values = request.model_dump()

    try:
        await _client(client).update(
            PROFILES_TABLE, values, {"id": user.id}, access_token=session.access_token
        )
    except BackendError as e:
        logger.error(f"Error updating profile for {user.id}: {e}")
        raise HTTPException(status_code=502, detail=e.message or "Error updating profile")

    return ProfileResponse(
        profile=Profile(id=user.id, email=user.email or "", **values),
        message="Profile updated successfully!",
    )


@router.get("/orders", response_model=list[Order])
async def list_orders(
    session: ShopperSession = Depends(require_user),
    client: Optional[SupabaseClient] = Depends(get_supabase_client),
):
    """Order history for the signed-in shopper, newest first"""
    try:
        rows = await _client(client).select(
            ORDERS_TABLE,
            {"user_id": session.user.id},
            access_token=session.access_token,
            order="created_at.desc",
        )
    except BackendError as e:
        logger.error(f"Error fetching orders for {session.user.id}: {e}")
        raise HTTPException(status_code=502, detail=e.message)

    return [Order.model_validate(row) for row in rows]
