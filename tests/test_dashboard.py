"""
Tests for dashboard sessions, the session registry and the history ticker.
"""

import asyncio
import random
import threading

import pytest
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from unittest.mock import MagicMock

from cfo_helper.config import settings
from cfo_helper.errors import MissingResultsError
from cfo_helper.dashboard.registry import SessionRegistry, seed_employees
from cfo_helper.dashboard.scheduler import HISTORY_JOB_ID, setup_apscheduler, tick_histories
from cfo_helper.dashboard.schemas import CustomParameterCreate, UsageStats
from cfo_helper.dashboard.session import DashboardSession
from cfo_helper.identity.schemas import Identity
from cfo_helper.simulation.history import default_history
from cfo_helper.simulation.schemas import SimulationInputs


@pytest.fixture
def renderer():
    return MagicMock(return_value=b"%PDF-1.4 fake")


@pytest.fixture
def session(advisor, renderer):
    return DashboardSession(
        user_id="user_test_123",
        organization_type="startup",
        advisor=advisor,
        report_renderer=renderer,
    )


@pytest.fixture
def registry(advisor):
    return SessionRegistry(lambda **kwargs: DashboardSession(advisor=advisor, **kwargs))


# =============================================================================
# Dashboard session
# =============================================================================

class TestDashboardSession:
    """Tests for per-user dashboard state."""

    def test_initial_state(self, session):
        state = session.state()

        assert state.results is None
        assert state.inputs == SimulationInputs()
        assert state.usage.simulations == 12
        assert state.usage.exports == 5
        assert len(state.history) == 8

    def test_usage_total(self):
        assert UsageStats().total == 17

    def test_simulate_stores_result_and_counts(self, session):
        results = session.simulate()

        assert session.results is results
        assert results.revenue == pytest.approx(431856)
        assert session.usage.simulations == 13

    def test_simulate_uses_current_org_type(self, session):
        session.organization_type = "event"
        assert session.simulate().revenue == pytest.approx(191936)

    def test_update_inputs_replaces_wholesale(self, session):
        new_inputs = SimulationInputs(employees=9, product_price=5000)
        session.update_inputs(new_inputs)
        new_inputs.employees = 1

        assert session.inputs.employees == 9
        assert session.inputs.product_price == 5000
        assert session.results is None

    def test_custom_parameters(self, session):
        param = session.add_custom_parameter(CustomParameterCreate(label="Grants", value=5, min=0, max=10))

        assert [p.id for p in session.inputs.custom_parameters] == [param.id]

        session.remove_custom_parameter(param.id)
        assert session.inputs.custom_parameters == []

        with pytest.raises(KeyError):
            session.remove_custom_parameter(param.id)

    def test_custom_parameter_with_inverted_range(self, session):
        with pytest.raises(ValueError):
            session.add_custom_parameter(CustomParameterCreate(label="Bad", value=5, min=10, max=0))

    def test_export_requires_results(self, session, renderer):
        with pytest.raises(MissingResultsError, match="Run a simulation first"):
            session.export_report()

        renderer.assert_not_called()
        assert session.usage.exports == 5

    def test_export_renders_latest_result(self, session, renderer):
        results = session.simulate()

        pdf = session.export_report()

        assert pdf.startswith(b"%PDF")
        renderer.assert_called_once_with(results, session.history)
        assert session.usage.exports == 6

    def test_tick_history(self, session):
        before = list(session.history)
        after = session.tick_history(random.Random(3))

        assert session.history is after
        assert [p.month for p in after] == [p.month for p in before]
        assert after != before

    def test_financial_context_tracks_inputs(self, session):
        before = session.financial_context()
        session.update_inputs(SimulationInputs(product_price=9000))

        assert session.financial_context().projected_revenue > before.projected_revenue
        assert before.current_revenue == default_history()[-1].revenue



# =============================================================================
# Registry
# =============================================================================

class TestSessionRegistry:
    """Tests for the in-memory session registry."""

    def test_new_session_seeded_from_identity(self, registry, identity):
        session = registry.get_or_create(identity)

        assert session.user_id == identity.user_id
        assert session.organization_type == "startup"
        assert session.inputs.employees == 8
        assert session.onboarding_completed is True
        assert session.state().onboarding_completed is True
        assert len(registry) == 1

    def test_same_session_returned(self, registry, identity):
        assert registry.get_or_create(identity) is registry.get_or_create(identity)

    def test_bare_identity_gets_defaults(self, registry):
        session = registry.get_or_create(Identity(user_id="user_bare"))

        assert session.organization_type is None
        assert session.inputs.employees == 5
        assert session.onboarding_completed is False

    @pytest.mark.parametrize("team_size", ["10-20", "many", -3, [4], 0])
    def test_unusable_team_size_falls_back_to_default(self, registry, team_size):
        identity = Identity(user_id="user_odd", metadata={"organizationData": {"teamSize": team_size}})

        session = registry.get_or_create(identity)

        assert session.inputs.employees == 5

    def test_numeric_string_team_size(self, registry):
        identity = Identity(user_id="user_str", metadata={"team_size": "12"})
        assert registry.get_or_create(identity).inputs.employees == 12

    def test_seed_employees(self):
        assert seed_employees(None) == 5
        assert seed_employees("") == 5
        assert seed_employees("abc") == 5
        assert seed_employees(-1) == 5
        assert seed_employees(40) == 40

    def test_sessions_are_isolated(self, identity):
        registry = SessionRegistry()
        first = registry.get_or_create(identity)
        second = registry.get_or_create(Identity(user_id="someone_else"))

        first.simulate()

        assert second.results is None
        assert first.advisor is not second.advisor

    def test_record_onboarding(self, registry):
        session = registry.get_or_create(Identity(user_id="user_new"))
        registry.record_onboarding("user_new", "event")
        registry.record_onboarding("unknown_user", "event")

        assert session.organization_type == "event"
        assert session.onboarding_completed is True
        assert registry.get("unknown_user") is None

    def test_tick_all(self, registry, identity):
        session = registry.get_or_create(identity)
        before = list(session.history)

        assert registry.tick_all(random.Random(5)) == 1
        assert session.history != before

    def test_clear(self, registry, identity):
        registry.get_or_create(identity)
        registry.clear()

        assert len(registry) == 0
        assert registry.get(identity.user_id) is None


# =============================================================================
# Scheduler
# =============================================================================

class TestHistoryScheduler:
    """Tests for the APScheduler wiring."""

    def test_setup_registers_interval_job(self, registry):
        scheduler = MagicMock()

        setup_apscheduler(scheduler, registry)

        scheduler.add_job.assert_called_once()
        args, kwargs = scheduler.add_job.call_args
        assert args == (tick_histories, "interval")
        assert kwargs["seconds"] == 45
        assert kwargs["id"] == HISTORY_JOB_ID
        assert kwargs["args"] == [registry]
        assert kwargs["replace_existing"] is True

    def test_tick_job_is_a_coroutine(self):
        assert asyncio.iscoroutinefunction(tick_histories)

    @pytest.mark.asyncio
    async def test_tick_histories(self, registry, identity):
        registry.get_or_create(identity)
        assert await tick_histories(registry) == 1

    @pytest.mark.asyncio
    async def test_job_runs_on_event_loop_thread(self, monkeypatch):
        loop_thread = threading.get_ident()
        job_threads = []

        def record_thread(*args, **kwargs):
            job_threads.append(threading.get_ident())
            return 0

        registry = MagicMock()
        registry.tick_all.side_effect = record_thread
        monkeypatch.setattr(settings, "HISTORY_TICK_SECONDS", 0.05)

        scheduler = AsyncIOScheduler()
        setup_apscheduler(scheduler, registry)
        scheduler.start()
        try:
            for _ in range(100):
                if job_threads:
                    break
                await asyncio.sleep(0.02)
        finally:
            scheduler.shutdown(wait=False)

        assert job_threads
        assert all(thread == loop_thread for thread in job_threads)
