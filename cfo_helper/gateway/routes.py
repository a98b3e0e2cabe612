"""Persistence API routes.

Endpoints:
- GET /users/me - Profile of the signed-in user
- GET/PUT /financial-data - Latest financial snapshot
- GET/POST /simulations, DELETE /simulations/{id} - Saved simulation runs
- GET/POST /transactions, PUT/DELETE /transactions/{id}
- GET/POST /monthly-reports
- GET /summary - Dashboard summary
- GET/POST /chat-history/{session_id} - Archived advisor conversations
- GET /health/database - Store connectivity

A gateway failure on any of these returns 503 with the store's error.
"""
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from cfo_helper.database import get_db
from cfo_helper.dashboard.registry import get_dashboard_session
from cfo_helper.dashboard.session import DashboardSession
from cfo_helper.gateway import analytics, chat, finance, users
from cfo_helper.gateway import schemas
from cfo_helper.gateway.result import GatewayResult
from cfo_helper.identity.dependencies import get_current_identity
from cfo_helper.identity.schemas import Identity

logger = logging.getLogger(__name__)

router = APIRouter()


def _unwrap(result: GatewayResult):
    """Return result data or raise 503."""
    if not result.success:
        raise HTTPException(status_code=503, detail=f"Database unavailable: {result.error}")
    return result.data


async def ensure_profile(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    """
    Make sure a profile row exists before touching user-scoped tables.

    Failure is logged and ignored; the route's own gateway call will report
    any real outage.
    """
    result = await users.get_or_create_profile(db, identity.user_id, identity.email, {
        "full_name": identity.full_name,
        "organizationData": identity.organization_data,
    })
    if not result.success:
        logger.warning(f"Profile bootstrap skipped for {identity.user_id}: {result.error}")
    return identity


# ============================================================================
# PROFILE
# ============================================================================

@router.get("/users/me", response_model=schemas.ProfileResponse)
async def get_my_profile(
    identity: Identity = Depends(ensure_profile),
    db: AsyncSession = Depends(get_db),
):
    profile = _unwrap(await users.get_profile(db, identity.user_id))
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


# ============================================================================
# FINANCIAL DATA
# ============================================================================

@router.get("/financial-data", response_model=Optional[schemas.FinancialDataResponse])
async def get_financial_data(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Latest saved snapshot, or null if none has been saved."""
    return _unwrap(await finance.get_financial_data(db, identity.user_id))


@router.put("/financial-data", response_model=schemas.FinancialDataResponse)
async def save_financial_data(
    data: schemas.FinancialDataUpdate,
    identity: Identity = Depends(ensure_profile),
    db: AsyncSession = Depends(get_db),
):
    return _unwrap(await finance.save_financial_data(db, identity.user_id, data.model_dump()))


# ============================================================================
# SIMULATIONS
# ============================================================================

@router.get("/simulations", response_model=List[schemas.SimulationResponse])
async def list_simulations(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    return _unwrap(await finance.list_simulations(db, identity.user_id))


@router.post("/simulations", response_model=schemas.SimulationResponse)
async def save_simulation(
    data: schemas.SimulationCreate,
    identity: Identity = Depends(ensure_profile),
    session: DashboardSession = Depends(get_dashboard_session),
    db: AsyncSession = Depends(get_db),
):
    """Save the dashboard's current inputs and latest result under a name."""
    if session.results is None:
        raise HTTPException(status_code=409, detail="Run a simulation first to save it")

    return _unwrap(await finance.save_simulation(
        db,
        identity.user_id,
        name=data.name,
        description=data.description,
        inputs=session.inputs.model_dump(mode="json"),
        results=session.results.model_dump(mode="json"),
    ))


@router.delete("/simulations/{simulation_id}", status_code=204)
async def delete_simulation(
    simulation_id: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    _unwrap(await finance.delete_simulation(db, identity.user_id, simulation_id))
    return Response(status_code=204)


# ============================================================================
# TRANSACTIONS
# ============================================================================

@router.get("/transactions", response_model=List[schemas.TransactionResponse])
async def list_transactions(
    limit: int = Query(50, ge=1, le=500),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Recent transactions, or all transactions in a date range when both bounds are given."""
    if start_date and end_date:
        if start_date > end_date:
            raise HTTPException(status_code=422, detail="start_date must not be after end_date")
        return _unwrap(await finance.list_transactions_by_date_range(
            db, identity.user_id, start_date, end_date
        ))
    return _unwrap(await finance.list_transactions(db, identity.user_id, limit=limit))


@router.post("/transactions", response_model=schemas.TransactionResponse)
async def add_transaction(
    data: schemas.TransactionCreate,
    identity: Identity = Depends(ensure_profile),
    db: AsyncSession = Depends(get_db),
):
    return _unwrap(await finance.add_transaction(db, identity.user_id, data.model_dump()))


@router.put("/transactions/{transaction_id}", response_model=schemas.TransactionResponse)
async def update_transaction(
    transaction_id: str,
    data: schemas.TransactionUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    result = await finance.update_transaction(
        db, identity.user_id, transaction_id, data.model_dump(exclude_unset=True)
    )
    if not result.success and result.error and result.error.endswith("not found"):
        raise HTTPException(status_code=404, detail=result.error)
    return _unwrap(result)


@router.delete("/transactions/{transaction_id}", status_code=204)
async def delete_transaction(
    transaction_id: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    _unwrap(await finance.delete_transaction(db, identity.user_id, transaction_id))
    return Response(status_code=204)


# ============================================================================
# MONTHLY REPORTS
# ============================================================================

@router.get("/monthly-reports", response_model=List[schemas.MonthlyReportResponse])
async def list_monthly_reports(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    return _unwrap(await finance.list_monthly_reports(db, identity.user_id))


@router.post("/monthly-reports", response_model=schemas.MonthlyReportResponse)
async def save_monthly_report(
    data: schemas.MonthlyReportCreate,
    identity: Identity = Depends(ensure_profile),
    db: AsyncSession = Depends(get_db),
):
    return _unwrap(await finance.save_monthly_report(db, identity.user_id, **data.model_dump()))


# ============================================================================
# SUMMARY
# ============================================================================

@router.get("/summary", response_model=schemas.FinancialSummaryResponse)
async def get_summary(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    return _unwrap(await analytics.get_financial_summary(db, identity.user_id))


# ============================================================================
# CHAT HISTORY
# ============================================================================

@router.get("/chat-history/{session_id}", response_model=List[schemas.ChatHistoryRow])
async def get_chat_history(
    session_id: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    return _unwrap(await chat.get_chat_history(db, identity.user_id, session_id))


@router.post("/chat-history/{session_id}", response_model=List[schemas.ChatHistoryRow])
async def archive_chat(
    session_id: str,
    data: schemas.ChatArchiveRequest,
    identity: Identity = Depends(ensure_profile),
    db: AsyncSession = Depends(get_db),
):
    """Persist chat turns in order under session_id."""
    saved = []
    for entry in data.messages:
        saved.append(_unwrap(await chat.save_chat_message(
            db,
            identity.user_id,
            session_id,
            message=entry.message,
            is_user=entry.is_user,
            financial_context=entry.financial_context,
        )))
    return saved


# ============================================================================
# HEALTH
# ============================================================================

@router.get("/health/database")
async def database_health(db: AsyncSession = Depends(get_db)):
    """Check that the store answers a trivial query."""
    _unwrap(await analytics.check_connection(db))
    return {"status": "healthy"}
