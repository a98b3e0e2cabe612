"""Dashboard summary built from several gateway reads."""
import logging
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from cfo_helper.gateway.result import GatewayResult
from cfo_helper.gateway.finance import get_financial_data, list_simulations, list_transactions

logger = logging.getLogger(__name__)


RECENT_TRANSACTIONS = 10


async def get_financial_summary(db: AsyncSession, user_id: str) -> GatewayResult[Dict[str, Any]]:
    """
    Latest snapshot, recent transactions, simulation count and cash-flow totals.

    Reads run one after another on the same session.
    """
    financial = await get_financial_data(db, user_id)
    transactions = await list_transactions(db, user_id, limit=RECENT_TRANSACTIONS)
    simulations = await list_simulations(db, user_id)

    for part in (financial, transactions, simulations):
        if not part.success:
            return GatewayResult.fail(part.error)

    recent = transactions.data
    total_income = sum(t.amount for t in recent if t.type == "income")
    total_expenses = sum(t.amount for t in recent if t.type == "expense")

    return GatewayResult.ok({
        "financial_data": financial.data,
        "recent_transactions": recent,
        "simulation_count": len(simulations.data),
        "cash_flow_summary": {
            "total_income": total_income,
            "total_expenses": total_expenses,
            "net_cash_flow": total_income - total_expenses,
        },
    })


async def check_connection(db: AsyncSession) -> GatewayResult[bool]:
    """Run a trivial query against the store."""
    try:
        await db.execute(text("SELECT 1"))
        return GatewayResult.ok(True)
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return GatewayResult.fail(e)
