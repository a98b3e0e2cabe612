"""
Tests for session tokens, the Clerk client and the onboarding/sync flows.
"""

import json

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwt
from unittest.mock import AsyncMock

from cfo_helper.errors import IdentityError
from cfo_helper.gateway import users
from cfo_helper.identity.clerk_client import ClerkClient
from cfo_helper.identity.onboarding import build_onboarding_metadata, complete_onboarding, sync_user
from cfo_helper.identity.schemas import Identity, OnboardingRequest
from cfo_helper.identity.tokens import decode_session_token, identity_from_claims


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(scope="module")
def rsa_keys():
    """PEM private/public key pair for signing test tokens."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


@pytest.fixture
def onboarding_request():
    return OnboardingRequest(
        organization_type="event",
        company_name="Festival Co",
        team_size=12,
        industry="Events",
        description="Summer festivals",
    )


# =============================================================================
# Tokens
# =============================================================================

class TestTokens:
    """Tests for session token decoding."""

    def test_valid_token(self, rsa_keys):
        private_pem, public_pem = rsa_keys
        token = jwt.encode({"sub": "user_1", "email": "a@b.com"}, private_pem, algorithm="RS256")

        payload = decode_session_token(token, key=public_pem)

        assert payload["sub"] == "user_1"

    def test_bad_signature(self, rsa_keys):
        _, public_pem = rsa_keys
        other = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        other_pem = other.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode()
        token = jwt.encode({"sub": "user_1"}, other_pem, algorithm="RS256")

        assert decode_session_token(token, key=public_pem) is None

    def test_garbage_token(self, rsa_keys):
        _, public_pem = rsa_keys
        assert decode_session_token("not-a-jwt", key=public_pem) is None

    def test_identity_from_claims(self):
        identity = identity_from_claims({
            "sub": "user_1",
            "email": "a@b.com",
            "name": "Ada",
            "unsafe_metadata": {"organizationData": {"organizationType": "startup", "teamSize": 4}},
        })

        assert identity.user_id == "user_1"
        assert identity.full_name == "Ada"
        assert identity.organization_type == "startup"
        assert identity.team_size == 4
        assert identity.onboarding_completed is False

    def test_identity_requires_subject(self):
        assert identity_from_claims({"email": "a@b.com"}) is None


# =============================================================================
# Clerk client
# =============================================================================

class TestClerkClient:
    """Tests for the Clerk Backend API wrapper."""

    @pytest.mark.asyncio
    async def test_get_user(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path.endswith("/users/user_1")
            assert request.headers["Authorization"] == "Bearer sk_test"
            return httpx.Response(200, json={
                "id": "user_1",
                "first_name": "Ada",
                "last_name": "Lovelace",
                "primary_email_address_id": "e2",
                "email_addresses": [
                    {"id": "e1", "email_address": "old@b.com"},
                    {"id": "e2", "email_address": "ada@b.com"},
                ],
                "unsafe_metadata": {"onboardingCompleted": True},
            })

        client = ClerkClient(secret_key="sk_test", base_url="https://clerk.test/v1", transport=httpx.MockTransport(handler))
        identity = await client.get_user("user_1")

        assert identity.email == "ada@b.com"
        assert identity.full_name == "Ada Lovelace"
        assert identity.onboarding_completed is True

    @pytest.mark.asyncio
    async def test_update_unsafe_metadata(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "user_1", "unsafe_metadata": {"company_name": "Acme"}})

        client = ClerkClient(secret_key="sk_test", base_url="https://clerk.test/v1", transport=httpx.MockTransport(handler))
        stored = await client.update_unsafe_metadata("user_1", {"company_name": "Acme"})

        assert stored == {"company_name": "Acme"}
        assert seen["method"] == "PATCH"
        assert seen["path"] == "/v1/users/user_1/metadata"
        assert seen["body"] == {"unsafe_metadata": {"company_name": "Acme"}}

    @pytest.mark.asyncio
    async def test_http_errors_raise_identity_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"errors": []}))
        client = ClerkClient(secret_key="sk_test", base_url="https://clerk.test/v1", transport=transport)

        with pytest.raises(IdentityError):
            await client.update_unsafe_metadata("user_1", {})


# =============================================================================
# Onboarding
# =============================================================================

class TestOnboarding:
    """Tests for onboarding and profile sync."""

    def test_metadata_merges_existing_keys(self, identity, onboarding_request):
        metadata = build_onboarding_metadata(identity, onboarding_request)

        assert metadata["onboardingCompleted"] is True
        assert metadata["organization_type"] == "event"
        assert metadata["team_size"] == 12
        assert metadata["organizationData"] == {
            "organizationType": "event",
            "companyName": "Festival Co",
            "teamSize": 12,
            "industry": "Events",
            "description": "Summer festivals",
        }

    @pytest.mark.asyncio
    async def test_complete_onboarding(self, db, identity, onboarding_request):
        clerk = AsyncMock()

        result = await complete_onboarding(db, identity, onboarding_request, clerk)

        assert result.onboarding_completed
        assert result.metadata_saved
        assert result.profile_saved
        assert result.errors == {}
        clerk.update_unsafe_metadata.assert_awaited_once()

        profile = (await users.get_profile(db, identity.user_id)).data
        assert profile.organization_type == "event"
        assert profile.team_size == 12

    @pytest.mark.asyncio
    async def test_metadata_failure_does_not_block(self, db, identity, onboarding_request):
        clerk = AsyncMock()
        clerk.update_unsafe_metadata.side_effect = IdentityError("clerk down")

        result = await complete_onboarding(db, identity, onboarding_request, clerk)

        assert result.onboarding_completed
        assert result.metadata_saved is False
        assert result.profile_saved is True
        assert result.errors == {"metadata": "clerk down"}

    @pytest.mark.asyncio
    async def test_profile_failure_does_not_block(self, identity, onboarding_request):
        broken = AsyncMock()
        broken.get.side_effect = RuntimeError("store down")

        result = await complete_onboarding(broken, identity, onboarding_request, AsyncMock())

        assert result.metadata_saved is True
        assert result.profile_saved is False
        assert result.errors["profile"] == "store down"

    @pytest.mark.asyncio
    async def test_sync_creates_profile_with_defaults(self, db):
        bare = Identity(user_id="user_bare", email="bare@example.com")

        result = await sync_user(db, bare)

        assert result.success
        assert result.profile_id == "user_bare"
        profile = (await users.get_profile(db, "user_bare")).data
        assert profile.full_name == "Unknown User"
        assert profile.organization_type == "other"
        assert profile.team_size == 1

    @pytest.mark.asyncio
    async def test_sync_updates_existing_profile(self, db):
        await users.get_or_create_profile(db, "user_2", "old@example.com")
        identity = Identity(
            user_id="user_2",
            email="new@example.com",
            full_name="Grace",
            metadata={"company_name": "Navy", "organization_type": "enterprise", "team_size": 40},
        )

        result = await sync_user(db, identity)

        assert result.success
        profile = (await users.get_profile(db, "user_2")).data
        assert profile.email == "new@example.com"
        assert profile.company_name == "Navy"
        assert profile.organization_type == "enterprise"
        assert profile.team_size == 40
