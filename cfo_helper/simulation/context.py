"""Financial context builder - the advisor's read-only view of the dashboard."""
from typing import List, Optional, Union

from cfo_helper.advisor.schemas import FinancialContext
from cfo_helper.simulation.engine import run_projection
from cfo_helper.simulation.schemas import HistoricalPoint, OrganizationType, SimulationInputs


MAX_TIME_HORIZON_MONTHS = 12


def build_financial_context(
    inputs: SimulationInputs,
    organization_type: Optional[Union[OrganizationType, str]] = None,
    history: Optional[List[HistoricalPoint]] = None,
) -> FinancialContext:
    """
    Build the advisor context from the current inputs.

    Recomputed on every call, so it always reflects the latest inputs
    rather than the last stored simulation result.
    """
    projection = run_projection(inputs, organization_type)
    current_revenue = history[-1].revenue if history else 0.0

    if current_revenue > 0:
        growth_rate = (projection.revenue - current_revenue) / current_revenue * 100
    else:
        growth_rate = 0.0

    if projection.runway is None:
        time_horizon = MAX_TIME_HORIZON_MONTHS
    else:
        time_horizon = min(projection.runway, MAX_TIME_HORIZON_MONTHS)

    return FinancialContext(
        current_revenue=current_revenue,
        projected_revenue=projection.revenue,
        expenses=projection.expenses,
        growth_rate=growth_rate,
        time_horizon=time_horizon,
        cash_flow=projection.net_profit,
        profit_margin=projection.profit_margin,
    )
