"""Financial data, simulation, transaction and monthly report gateway."""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from cfo_helper.gateway.result import GatewayResult
from cfo_helper.models import FinancialSnapshot, Simulation, Transaction, MonthlyReport

logger = logging.getLogger(__name__)


SNAPSHOT_FIELDS = {
    "current_funds",
    "monthly_revenue",
    "monthly_expenses",
    "employees",
    "marketing_spend",
    "product_price",
    "misc_expenses",
}

TRANSACTION_FIELDS = {"type", "amount", "description", "category", "date"}


# ============================================================================
# FINANCIAL DATA
# ============================================================================

async def get_financial_data(db: AsyncSession, user_id: str) -> GatewayResult[Optional[FinancialSnapshot]]:
    """Latest financial snapshot for a user; data is None when there is none."""
    try:
        result = await db.execute(
            select(FinancialSnapshot)
            .where(FinancialSnapshot.user_id == user_id)
            .order_by(FinancialSnapshot.created_at.desc())
            .limit(1)
        )
        return GatewayResult.ok(result.scalars().first())
    except Exception as e:
        logger.error(f"Error getting financial data for {user_id}: {e}")
        return GatewayResult.fail(e)


async def save_financial_data(
    db: AsyncSession,
    user_id: str,
    values: Dict[str, Any],
) -> GatewayResult[FinancialSnapshot]:
    """Update the latest snapshot, or insert the first one."""
    existing = await get_financial_data(db, user_id)
    if not existing.success:
        return existing

    fields = {k: v for k, v in values.items() if k in SNAPSHOT_FIELDS}
    try:
        snapshot = existing.data
        if snapshot is not None:
            for field, value in fields.items():
                setattr(snapshot, field, value)
        else:
            snapshot = FinancialSnapshot(user_id=user_id, **fields)
            db.add(snapshot)

        await db.commit()
        await db.refresh(snapshot)
        return GatewayResult.ok(snapshot)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error saving financial data for {user_id}: {e}")
        return GatewayResult.fail(e)


# ============================================================================
# SIMULATIONS
# ============================================================================

async def list_simulations(db: AsyncSession, user_id: str) -> GatewayResult[List[Simulation]]:
    """All saved simulations, newest first."""
    try:
        result = await db.execute(
            select(Simulation)
            .where(Simulation.user_id == user_id)
            .order_by(Simulation.created_at.desc())
        )
        return GatewayResult.ok(list(result.scalars().all()))
    except Exception as e:
        logger.error(f"Error getting simulations for {user_id}: {e}")
        return GatewayResult.fail(e)


async def save_simulation(
    db: AsyncSession,
    user_id: str,
    name: str,
    inputs: Dict[str, Any],
    results: Dict[str, Any],
    description: Optional[str] = None,
) -> GatewayResult[Simulation]:
    """Store a named simulation run."""
    try:
        simulation = Simulation(
            user_id=user_id,
            name=name,
            description=description,
            inputs=inputs,
            results=results,
        )
        db.add(simulation)
        await db.commit()
        await db.refresh(simulation)
        return GatewayResult.ok(simulation)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error saving simulation for {user_id}: {e}")
        return GatewayResult.fail(e)


async def delete_simulation(db: AsyncSession, user_id: str, simulation_id: str) -> GatewayResult[None]:
    try:
        await db.execute(
            delete(Simulation).where(
                Simulation.id == simulation_id,
                Simulation.user_id == user_id,
            )
        )
        await db.commit()
        return GatewayResult.ok()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error deleting simulation {simulation_id}: {e}")
        return GatewayResult.fail(e)


# ============================================================================
# TRANSACTIONS
# ============================================================================

async def list_transactions(
    db: AsyncSession,
    user_id: str,
    limit: int = 50,
) -> GatewayResult[List[Transaction]]:
    """Most recent transactions by date."""
    try:
        result = await db.execute(
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(Transaction.date.desc(), Transaction.created_at.desc())
            .limit(limit)
        )
        return GatewayResult.ok(list(result.scalars().all()))
    except Exception as e:
        logger.error(f"Error getting transactions for {user_id}: {e}")
        return GatewayResult.fail(e)


async def list_transactions_by_date_range(
    db: AsyncSession,
    user_id: str,
    start_date: date,
    end_date: date,
) -> GatewayResult[List[Transaction]]:
    """Transactions with start_date <= date <= end_date, newest first."""
    try:
        result = await db.execute(
            select(Transaction)
            .where(
                Transaction.user_id == user_id,
                Transaction.date >= start_date,
                Transaction.date <= end_date,
            )
            .order_by(Transaction.date.desc())
        )
        return GatewayResult.ok(list(result.scalars().all()))
    except Exception as e:
        logger.error(f"Error getting transactions by date range for {user_id}: {e}")
        return GatewayResult.fail(e)


async def add_transaction(
    db: AsyncSession,
    user_id: str,
    values: Dict[str, Any],
) -> GatewayResult[Transaction]:
    try:
        transaction = Transaction(
            user_id=user_id,
            **{k: v for k, v in values.items() if k in TRANSACTION_FIELDS},
        )
        db.add(transaction)
        await db.commit()
        await db.refresh(transaction)
        return GatewayResult.ok(transaction)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error adding transaction for {user_id}: {e}")
        return GatewayResult.fail(e)


async def update_transaction(
    db: AsyncSession,
    user_id: str,
    transaction_id: str,
    updates: Dict[str, Any],
) -> GatewayResult[Transaction]:
    try:
        transaction = await db.get(Transaction, transaction_id)
        if transaction is None or transaction.user_id != user_id:
            return GatewayResult.fail(f"Transaction {transaction_id} not found")

        for field, value in updates.items():
            if field in TRANSACTION_FIELDS:
                setattr(transaction, field, value)

        await db.commit()
        await db.refresh(transaction)
        return GatewayResult.ok(transaction)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error updating transaction {transaction_id}: {e}")
        return GatewayResult.fail(e)


async def delete_transaction(db: AsyncSession, user_id: str, transaction_id: str) -> GatewayResult[None]:
    try:
        await db.execute(
            delete(Transaction).where(
                Transaction.id == transaction_id,
                Transaction.user_id == user_id,
            )
        )
        await db.commit()
        return GatewayResult.ok()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error deleting transaction {transaction_id}: {e}")
        return GatewayResult.fail(e)


# ============================================================================
# MONTHLY REPORTS
# ============================================================================

async def save_monthly_report(
    db: AsyncSession,
    user_id: str,
    month: int,
    year: int,
    total_revenue: float,
    total_expenses: float,
    cash_flow: Optional[Dict[str, Any]] = None,
) -> GatewayResult[MonthlyReport]:
    """Store a month's totals; net profit is derived."""
    try:
        report = MonthlyReport(
            user_id=user_id,
            month=month,
            year=year,
            total_revenue=total_revenue,
            total_expenses=total_expenses,
            net_profit=total_revenue - total_expenses,
            cash_flow=cash_flow,
        )
        db.add(report)
        await db.commit()
        await db.refresh(report)
        return GatewayResult.ok(report)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error saving monthly report for {user_id}: {e}")
        return GatewayResult.fail(e)


async def list_monthly_reports(db: AsyncSession, user_id: str) -> GatewayResult[List[MonthlyReport]]:
    """Monthly reports, most recent month first."""
    try:
        result = await db.execute(
            select(MonthlyReport)
            .where(MonthlyReport.user_id == user_id)
            .order_by(MonthlyReport.year.desc(), MonthlyReport.month.desc())
        )
        return GatewayResult.ok(list(result.scalars().all()))
    except Exception as e:
        logger.error(f"Error getting monthly reports for {user_id}: {e}")
        return GatewayResult.fail(e)
