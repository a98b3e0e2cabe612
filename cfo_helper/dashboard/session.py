"""Dashboard session - transient UI state for one user."""
import logging
import random
from typing import Callable, List, Optional

from cfo_helper.errors import MissingResultsError
from cfo_helper.advisor.schemas import FinancialContext
from cfo_helper.advisor.session import AdvisorSession
from cfo_helper.dashboard.schemas import CustomParameterCreate, DashboardState, UsageStats
from cfo_helper.reports.pdf import generate_pdf_report
from cfo_helper.simulation.context import build_financial_context
from cfo_helper.simulation.engine import run_projection
from cfo_helper.simulation.history import default_history, perturb_series
from cfo_helper.simulation.schemas import (
    CustomParameter,
    FinancialData,
    HistoricalPoint,
    SimulationInputs,
)

logger = logging.getLogger(__name__)


class DashboardSession:
    """
    Holds inputs, the latest result and counters for one user.

    `results` stays None until the first simulate(); after that it is
    replaced, never mutated, by each new run.
    """

    def __init__(
        self,
        user_id: str,
        organization_type: Optional[str] = None,
        inputs: Optional[SimulationInputs] = None,
        advisor: Optional[AdvisorSession] = None,
        history: Optional[List[HistoricalPoint]] = None,
        report_renderer: Callable[..., bytes] = generate_pdf_report,
        onboarding_completed: bool = False,
    ):
        self.user_id = user_id
        self.organization_type = organization_type
        self.onboarding_completed = onboarding_completed
        self.inputs = inputs or SimulationInputs()
        self.results: Optional[FinancialData] = None
        self.usage = UsageStats()
        self.history = history if history is not None else default_history()
        self.advisor = advisor or AdvisorSession()
        self._render_report = report_renderer

    # ------------------------------------------------------------------ #
    # Inputs
    def update_inputs(self, inputs: SimulationInputs) -> SimulationInputs:
        """Replace all inputs at once."""
        self.inputs = inputs.model_copy(deep=True)
        return self.inputs

    def add_custom_parameter(self, data: CustomParameterCreate) -> CustomParameter:
        parameter = CustomParameter(**data.model_dump())
        self.inputs = self.inputs.model_copy(
            update={"custom_parameters": [*self.inputs.custom_parameters, parameter]}
        )
        return parameter

    def remove_custom_parameter(self, parameter_id: str) -> None:
        """Remove a custom parameter by id. Raises KeyError if unknown."""
        remaining = [p for p in self.inputs.custom_parameters if p.id != parameter_id]
        if len(remaining) == len(self.inputs.custom_parameters):
            raise KeyError(parameter_id)
        self.inputs = self.inputs.model_copy(update={"custom_parameters": remaining})

    # ------------------------------------------------------------------ #
    # Actions
    def simulate(self) -> FinancialData:
        """Run the projection on the current inputs and store the result."""
        self.results = run_projection(self.inputs, self.organization_type)
        self.usage.simulations += 1
        return self.results

    def export_report(self) -> bytes:
        """
        Render the PDF report for the latest result.

        Raises:
            MissingResultsError: no simulation has been run yet
            ReportExportError: rendering failed
        """
        if self.results is None:
            raise MissingResultsError("Run a simulation first to generate a report")

        pdf = self._render_report(self.results, self.history)
        self.usage.exports += 1
        logger.info(f"Exported report for user {self.user_id}")
        return pdf

    def tick_history(self, rng: Optional[random.Random] = None) -> List[HistoricalPoint]:
        self.history = perturb_series(self.history, rng)
        return self.history

    def financial_context(self) -> FinancialContext:
        return build_financial_context(self.inputs, self.organization_type, self.history)

    def state(self) -> DashboardState:
        return DashboardState(
            inputs=self.inputs,
            results=self.results,
            organization_type=self.organization_type,
            onboarding_completed=self.onboarding_completed,
            usage=self.usage,
            history=self.history,
        )
