"""
Consolidated models package.

IMPORTANT: Explicit imports only - no wildcards to prevent circular imports.
"""

# Base utilities
from cfo_helper.models.base import generate_id

# User profile
from cfo_helper.models.user import User

# Financial records
from cfo_helper.models.financial import (
    FinancialSnapshot,
    Simulation,
    Transaction,
    MonthlyReport,
)

# Advisor chat history
from cfo_helper.models.chat import AiChatMessage

__all__ = [
    "generate_id",
    "User",
    "FinancialSnapshot",
    "Simulation",
    "Transaction",
    "MonthlyReport",
    "AiChatMessage",
]
