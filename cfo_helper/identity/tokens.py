"""Session token verification."""
import logging
from typing import Optional

from jose import JWTError, jwt

from cfo_helper.config import settings
from cfo_helper.identity.schemas import Identity

logger = logging.getLogger(__name__)

# Clerk signs session tokens with RS256
ALGORITHM = "RS256"


def decode_session_token(token: str, key: Optional[str] = None) -> Optional[dict]:
    """Decode and validate a session token.

    Returns the payload if valid, None otherwise.
    """
    try:
        return jwt.decode(
            token,
            key or settings.CLERK_JWT_KEY,
            algorithms=[ALGORITHM],
            options={"verify_aud": False},
        )
    except JWTError as e:
        logger.info(f"Rejected session token: {e}")
        return None


def identity_from_claims(payload: dict) -> Optional[Identity]:
    """Map token claims to an Identity; None when there is no subject."""
    user_id = payload.get("sub")
    if not user_id:
        return None
    return Identity(
        user_id=user_id,
        email=payload.get("email") or "",
        full_name=payload.get("name"),
        metadata=payload.get("metadata") or payload.get("unsafe_metadata") or {},
    )
