"""Onboarding and user sync routes.

Endpoints:
- POST /onboarding - Save organization details and create the profile
- POST /users/sync - Copy identity metadata into the profile table
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cfo_helper.database import get_db
from cfo_helper.dashboard.registry import SessionRegistry, get_session_registry
from cfo_helper.identity.clerk_client import ClerkClient, get_clerk_client
from cfo_helper.identity.dependencies import get_current_identity
from cfo_helper.identity.onboarding import complete_onboarding, sync_user
from cfo_helper.identity.schemas import Identity, OnboardingRequest, OnboardingResult, SyncResult


router = APIRouter()


@router.post("/onboarding", response_model=OnboardingResult)
async def onboarding(
    request: OnboardingRequest,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    clerk: ClerkClient = Depends(get_clerk_client),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """
    Complete onboarding.

    Always returns 200. The result says whether the metadata and profile
    writes succeeded; a failed write does not block the user.
    """
    result = await complete_onboarding(db, identity, request, clerk)
    registry.record_onboarding(identity.user_id, request.organization_type.value)
    return result


@router.post("/users/sync", response_model=SyncResult)
async def sync_current_user(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    return await sync_user(db, identity)
