"""Simulation Pydantic schemas."""
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from enum import Enum

from cfo_helper.models.base import generate_id


class OrganizationType(str, Enum):
    """Business shape chosen during onboarding."""
    STARTUP = "startup"
    ENTERPRISE = "enterprise"
    EVENT = "event"
    FREELANCE = "freelance"
    OTHER = "other"


class CustomParameterCategory(str, Enum):
    """Grouping for user-defined parameters."""
    INCOME = "income"
    EXPENSE = "expense"
    INVESTMENT = "investment"
    OTHER = "other"


class CustomParameter(BaseModel):
    """A user-defined named slider."""
    id: str = Field(default_factory=lambda: generate_id("param"))
    label: str = Field(..., min_length=1)
    value: float
    min: float
    max: float
    step: float = Field(1, gt=0)
    category: CustomParameterCategory = CustomParameterCategory.OTHER

    @model_validator(mode="after")
    def check_range(self):
        if self.min > self.max:
            raise ValueError("min must not exceed max")
        return self


class SimulationInputs(BaseModel):
    """Adjustable dashboard inputs. Replaced wholesale on every change."""
    employees: int = Field(5, ge=0)
    marketing_spend: float = Field(200000, ge=0)
    product_price: float = Field(2999, ge=0)
    misc_expenses: float = Field(150000, ge=0)
    current_funds: float = Field(5000000, ge=0)
    custom_parameters: List[CustomParameter] = Field(default_factory=list)


class BoundedSimulationInputs(SimulationInputs):
    """Inputs as accepted over HTTP, clamped to the dashboard slider ranges."""
    employees: int = Field(5, ge=1, le=100)
    marketing_spend: float = Field(200000, ge=0, le=1000000)
    product_price: float = Field(2999, ge=100, le=10000)
    misc_expenses: float = Field(150000, ge=0, le=500000)
    current_funds: float = Field(5000000, ge=100000, le=10000000)


class FinancialData(BaseModel):
    """Projection result. runway is None when expenses are zero (unbounded)."""
    revenue: float
    expenses: float
    net_profit: float
    runway: Optional[int] = None
    profit_margin: float

    @property
    def runway_is_unbounded(self) -> bool:
        return self.runway is None


class OrganizationProfile(BaseModel):
    """Constants selected by organization type."""
    multiplier: float
    base_salary: float
    base_fixed_cost: float


class HistoricalPoint(BaseModel):
    """One month of the mock revenue/expense series."""
    month: str
    revenue: float
    expenses: float
