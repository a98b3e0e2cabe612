"""Identity and onboarding schemas."""
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional

from cfo_helper.simulation.schemas import OrganizationType


class Identity(BaseModel):
    """The signed-in user as seen by the backend."""
    user_id: str
    email: str = ""
    full_name: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def organization_data(self) -> Dict[str, Any]:
        return self.metadata.get("organizationData") or {}

    @property
    def organization_type(self) -> Optional[str]:
        return self.organization_data.get("organizationType") or self.metadata.get("organization_type") or None

    @property
    def team_size(self) -> Optional[int]:
        return self.organization_data.get("teamSize") or self.metadata.get("team_size")

    @property
    def onboarding_completed(self) -> bool:
        return bool(self.metadata.get("onboardingCompleted"))


class OnboardingRequest(BaseModel):
    """Organization details collected by the onboarding flow."""
    organization_type: OrganizationType
    company_name: str = Field("", max_length=255)
    team_size: int = Field(5, ge=1)
    industry: str = Field("", max_length=255)
    description: str = ""


class OnboardingResult(BaseModel):
    """Which onboarding steps succeeded. Onboarding itself never fails."""
    onboarding_completed: bool = True
    metadata_saved: bool
    profile_saved: bool
    errors: Dict[str, str] = Field(default_factory=dict)


class SyncResult(BaseModel):
    """Outcome of a manual profile sync."""
    success: bool
    message: str
    profile_id: Optional[str] = None
