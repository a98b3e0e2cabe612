"""Dashboard Pydantic schemas."""
from pydantic import BaseModel, Field
from typing import List, Optional

from cfo_helper.simulation.schemas import (
    CustomParameter,
    CustomParameterCategory,
    FinancialData,
    HistoricalPoint,
    SimulationInputs,
)


class UsageStats(BaseModel):
    """Counters shown on the dashboard header."""
    simulations: int = 12
    exports: int = 5

    @property
    def total(self) -> int:
        return self.simulations + self.exports


class CustomParameterCreate(BaseModel):
    """Request to add a user-defined parameter."""
    label: str = Field(..., min_length=1, max_length=100)
    value: float
    min: float
    max: float
    step: float = Field(1, gt=0)
    category: CustomParameterCategory = CustomParameterCategory.OTHER


class DashboardState(BaseModel):
    """Everything the dashboard renders."""
    inputs: SimulationInputs
    results: Optional[FinancialData] = None
    organization_type: Optional[str] = None
    onboarding_completed: bool = False
    usage: UsageStats
    history: List[HistoricalPoint]


class SimulateResponse(BaseModel):
    results: FinancialData
    usage: UsageStats


class CustomParameterResponse(BaseModel):
    parameter: CustomParameter
    custom_parameters: List[CustomParameter]
