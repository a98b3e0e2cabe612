"""Projection engine.

The organization profile table below is the single source of truth for the
per-type constants; nothing else in the codebase should hard-code them.
"""
import math
from typing import Dict, Optional, Union

from cfo_helper.simulation.schemas import (
    FinancialData,
    OrganizationProfile,
    OrganizationType,
    SimulationInputs,
)


BASE_QUANTITY = 100

DEFAULT_PROFILE = OrganizationProfile(multiplier=1.0, base_salary=60000, base_fixed_cost=300000)

ORGANIZATION_PROFILES: Dict[OrganizationType, OrganizationProfile] = {
    OrganizationType.STARTUP: OrganizationProfile(multiplier=1.2, base_salary=70000, base_fixed_cost=300000),
    OrganizationType.EVENT: OrganizationProfile(multiplier=0.8, base_salary=60000, base_fixed_cost=200000),
    OrganizationType.ENTERPRISE: DEFAULT_PROFILE,
    OrganizationType.FREELANCE: DEFAULT_PROFILE,
    OrganizationType.OTHER: DEFAULT_PROFILE,
}


def get_organization_profile(
    organization_type: Optional[Union[OrganizationType, str]]
) -> OrganizationProfile:
    """Look up the constants for an organization type, falling back to the default."""
    if organization_type is None:
        return DEFAULT_PROFILE
    try:
        org_type = OrganizationType(organization_type)
    except ValueError:
        return DEFAULT_PROFILE
    return ORGANIZATION_PROFILES.get(org_type, DEFAULT_PROFILE)


def assumed_quantity(profile: OrganizationProfile) -> int:
    """Unit sales assumed for a month."""
    return math.floor(BASE_QUANTITY * profile.multiplier)


def run_projection(
    inputs: SimulationInputs,
    organization_type: Optional[Union[OrganizationType, str]] = None,
) -> FinancialData:
    """
    Project one month of revenue, expenses and runway.

    Args:
        inputs: Current dashboard inputs
        organization_type: Organization type tag; unknown values use the default profile

    Returns:
        FinancialData for the month
    """
    profile = get_organization_profile(organization_type)
    quantity = assumed_quantity(profile)

    revenue = inputs.product_price * quantity * profile.multiplier
    expenses = (
        profile.base_fixed_cost
        + profile.base_salary * inputs.employees
        + inputs.marketing_spend
        + inputs.misc_expenses
    )
    net_profit = revenue - expenses

    runway = math.floor(inputs.current_funds / expenses) if expenses > 0 else None
    profit_margin = (net_profit / revenue) * 100 if revenue > 0 else 0.0

    return FinancialData(
        revenue=revenue,
        expenses=expenses,
        net_profit=net_profit,
        runway=runway,
        profit_margin=profit_margin,
    )
