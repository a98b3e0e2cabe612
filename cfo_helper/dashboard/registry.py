"""In-memory registry of dashboard sessions, keyed by user id."""
import logging
import random
from typing import Any, Callable, Dict, Optional

from fastapi import Depends

from cfo_helper.dashboard.session import DashboardSession
from cfo_helper.identity.dependencies import get_current_identity
from cfo_helper.identity.schemas import Identity
from cfo_helper.simulation.schemas import SimulationInputs

logger = logging.getLogger(__name__)


DEFAULT_EMPLOYEES = SimulationInputs.model_fields["employees"].default


def seed_employees(team_size: Any) -> int:
    """
    Employee count for a new session from the metadata team size.

    The metadata bag is client-writable, so anything that is not a
    non-negative integer falls back to the default.
    """
    if team_size is None or team_size == "":
        return DEFAULT_EMPLOYEES
    try:
        employees = int(team_size)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric team size {team_size!r}")
        return DEFAULT_EMPLOYEES
    if employees < 0:
        logger.warning(f"Ignoring negative team size {team_size!r}")
        return DEFAULT_EMPLOYEES
    return employees or DEFAULT_EMPLOYEES


class SessionRegistry:
    """
    Creates dashboard sessions lazily and keeps them for the process lifetime.

    Nothing is shared across processes; a restart starts every user fresh.
    """

    def __init__(self, session_factory: Callable[..., DashboardSession] = DashboardSession):
        self._sessions: Dict[str, DashboardSession] = {}
        self._factory = session_factory

    def get(self, user_id: str) -> Optional[DashboardSession]:
        return self._sessions.get(user_id)

    def get_or_create(self, identity: Identity) -> DashboardSession:
        """Return the user's session, seeding a new one from identity metadata."""
        session = self.get(identity.user_id)
        if session is not None:
            return session

        session = self._factory(
            user_id=identity.user_id,
            organization_type=identity.organization_type,
            inputs=SimulationInputs(employees=seed_employees(identity.team_size)),
            onboarding_completed=identity.onboarding_completed,
        )
        self._sessions[identity.user_id] = session
        logger.info(f"Created dashboard session for user {identity.user_id}")
        return session

    def record_onboarding(self, user_id: str, organization_type: Optional[str]) -> None:
        """Apply a finished onboarding to the user's live session, if any."""
        session = self.get(user_id)
        if session is not None:
            session.organization_type = organization_type
            session.onboarding_completed = True

    def tick_all(self, rng: Optional[random.Random] = None) -> int:
        """Perturb every session's history series. Returns the number ticked."""
        rng = rng or random.Random()
        sessions = list(self._sessions.values())
        for session in sessions:
            session.tick_history(rng)
        return len(sessions)

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)


# Global registry for the app process
session_registry = SessionRegistry()


def get_session_registry() -> SessionRegistry:
    return session_registry


def get_dashboard_session(
    identity: Identity = Depends(get_current_identity),
    registry: SessionRegistry = Depends(get_session_registry),
) -> DashboardSession:
    """FastAPI dependency: the signed-in user's dashboard session."""
    return registry.get_or_create(identity)
