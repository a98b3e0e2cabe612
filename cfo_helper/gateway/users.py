"""User profile gateway."""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from cfo_helper.gateway.result import GatewayResult
from cfo_helper.models import User

logger = logging.getLogger(__name__)


PROFILE_FIELDS = {"email", "full_name", "company_name", "industry", "organization_type", "team_size"}


def profile_from_metadata(user_id: str, email: str, metadata: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Seed profile columns from identity metadata.

    Reads `full_name` (or `name`) and the nested `organizationData` bag written
    during onboarding.
    """
    metadata = metadata or {}
    org = metadata.get("organizationData") or {}
    return {
        "id": user_id,
        "email": email,
        "full_name": metadata.get("full_name") or metadata.get("name"),
        "company_name": org.get("companyName"),
        "industry": org.get("industry"),
        "organization_type": org.get("organizationType") or None,
        "team_size": org.get("teamSize"),
    }


async def get_profile(db: AsyncSession, user_id: str) -> GatewayResult[Optional[User]]:
    """Fetch a profile by id; data is None when absent."""
    try:
        user = await db.get(User, user_id)
        return GatewayResult.ok(user)
    except Exception as e:
        logger.error(f"Error getting profile {user_id}: {e}")
        return GatewayResult.fail(e)


async def get_or_create_profile(
    db: AsyncSession,
    user_id: str,
    email: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> GatewayResult[User]:
    """Return the profile for user_id, inserting one seeded from metadata if absent."""
    try:
        existing = await db.get(User, user_id)
        if existing is not None:
            return GatewayResult.ok(existing)

        user = User(**profile_from_metadata(user_id, email, metadata))
        db.add(user)
        await db.commit()
        await db.refresh(user)
        logger.info(f"Created profile for user {user_id}")
        return GatewayResult.ok(user)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error in get_or_create_profile for {user_id}: {e}")
        return GatewayResult.fail(e)


async def update_profile(
    db: AsyncSession,
    user_id: str,
    updates: Dict[str, Any],
) -> GatewayResult[User]:
    """Apply field updates to a profile. Last write wins."""
    try:
        user = await db.get(User, user_id)
        if user is None:
            return GatewayResult.fail(f"User {user_id} not found")

        for field, value in updates.items():
            if field in PROFILE_FIELDS:
                setattr(user, field, value)

        await db.commit()
        await db.refresh(user)
        return GatewayResult.ok(user)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error updating profile {user_id}: {e}")
        return GatewayResult.fail(e)
