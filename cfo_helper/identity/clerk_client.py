"""Clerk Backend API client.

Only the two calls the dashboard needs: read a user, and merge keys into
that user's unsafe metadata bag.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from cfo_helper.config import settings
from cfo_helper.errors import IdentityError
from cfo_helper.identity.schemas import Identity

logger = logging.getLogger(__name__)


class ClerkClient:
    """Thin async wrapper around the Clerk Backend API."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.secret_key = secret_key if secret_key is not None else settings.CLERK_SECRET_KEY
        self.base_url = (base_url or settings.CLERK_API_URL).rstrip("/")
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.secret_key}"},
            transport=self._transport,
            timeout=10.0,
        )

    async def get_user(self, user_id: str) -> Identity:
        """Fetch a user and map it to an Identity."""
        try:
            async with self._client() as client:
                response = await client.get(f"/users/{user_id}")
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise IdentityError(f"Failed to load user {user_id}: {e}") from e

        data = response.json()
        emails = data.get("email_addresses") or []
        primary_id = data.get("primary_email_address_id")
        email = next(
            (e.get("email_address", "") for e in emails if e.get("id") == primary_id),
            emails[0].get("email_address", "") if emails else "",
        )
        full_name = " ".join(
            part for part in (data.get("first_name"), data.get("last_name")) if part
        ) or None

        return Identity(
            user_id=data["id"],
            email=email,
            full_name=full_name,
            metadata=data.get("unsafe_metadata") or {},
        )

    async def update_unsafe_metadata(self, user_id: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
        """Merge keys into the user's unsafe metadata. Returns the stored bag."""
        try:
            async with self._client() as client:
                response = await client.patch(
                    f"/users/{user_id}/metadata",
                    json={"unsafe_metadata": metadata},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise IdentityError(f"Failed to update metadata for {user_id}: {e}") from e

        return response.json().get("unsafe_metadata") or {}


def get_clerk_client() -> ClerkClient:
    """FastAPI dependency for the identity provider client."""
    return ClerkClient()
