"""Onboarding and profile sync.

Both flows write to two places (the identity provider's metadata bag and
the profile table) with no atomicity between them. A failure in either is
logged and reported in the result, never raised: a user who finished the
onboarding form always lands on the dashboard.
"""
import logging
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from cfo_helper.errors import IdentityError
from cfo_helper.gateway.users import get_or_create_profile, update_profile
from cfo_helper.identity.clerk_client import ClerkClient
from cfo_helper.identity.schemas import Identity, OnboardingRequest, OnboardingResult, SyncResult

logger = logging.getLogger(__name__)


def build_onboarding_metadata(identity: Identity, request: OnboardingRequest) -> Dict[str, Any]:
    """Merge onboarding answers into the existing metadata bag."""
    organization_data = {
        "organizationType": request.organization_type.value,
        "companyName": request.company_name,
        "teamSize": request.team_size,
        "industry": request.industry,
        "description": request.description,
    }
    return {
        **identity.metadata,
        "onboardingCompleted": True,
        "company_name": request.company_name,
        "industry": request.industry,
        "organization_type": request.organization_type.value,
        "team_size": request.team_size,
        "description": request.description,
        # nested copy read by older clients
        "organizationData": organization_data,
    }


async def complete_onboarding(
    db: AsyncSession,
    identity: Identity,
    request: OnboardingRequest,
    clerk: ClerkClient,
) -> OnboardingResult:
    """Save onboarding answers to the identity provider, then ensure a profile row exists."""
    errors: Dict[str, str] = {}
    metadata = build_onboarding_metadata(identity, request)

    metadata_saved = False
    try:
        await clerk.update_unsafe_metadata(identity.user_id, metadata)
        metadata_saved = True
    except IdentityError as e:
        logger.error(f"Failed to save onboarding metadata for {identity.user_id}: {e}")
        errors["metadata"] = str(e)

    profile = await get_or_create_profile(
        db,
        identity.user_id,
        identity.email,
        {
            "full_name": identity.full_name or request.company_name or "User",
            "organizationData": metadata["organizationData"],
        },
    )
    if not profile.success:
        logger.error(f"Failed to create profile for {identity.user_id}: {profile.error}")
        errors["profile"] = profile.error or "unknown error"

    return OnboardingResult(
        metadata_saved=metadata_saved,
        profile_saved=profile.success,
        errors=errors,
    )


async def sync_user(db: AsyncSession, identity: Identity) -> SyncResult:
    """Copy the identity's metadata into the profile table (create or update)."""
    meta = identity.metadata
    fields = {
        "email": identity.email,
        "full_name": identity.full_name or "Unknown User",
        "company_name": meta.get("company_name") or "",
        "industry": meta.get("industry") or "",
        "organization_type": meta.get("organization_type") or "other",
        "team_size": meta.get("team_size") or 1,
    }

    created = await get_or_create_profile(
        db,
        identity.user_id,
        identity.email,
        {
            "full_name": fields["full_name"],
            "organizationData": {
                "companyName": fields["company_name"],
                "industry": fields["industry"],
                "organizationType": fields["organization_type"],
                "teamSize": fields["team_size"],
            },
        },
    )
    if not created.success:
        logger.error(f"Sync failed for {identity.user_id}: {created.error}")
        return SyncResult(success=False, message=f"Sync failed: {created.error}")

    updated = await update_profile(db, identity.user_id, fields)
    if not updated.success:
        logger.error(f"Sync update failed for {identity.user_id}: {updated.error}")
        return SyncResult(success=False, message=f"Sync failed: {updated.error}")

    return SyncResult(
        success=True,
        message="User successfully synced to database!",
        profile_id=updated.data.id,
    )
