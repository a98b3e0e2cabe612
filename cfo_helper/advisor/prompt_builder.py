"""Prompt builder - assembles the single text prompt sent to the model.

Layout:
- fixed system instruction
- current financial context (omitted entirely when there is none)
- recent conversation as "User:" / "Assistant:" lines
- the new user message, then an open "Assistant:" turn
"""
from typing import List, Optional, Sequence

from cfo_helper.advisor.schemas import ChatMessage, FinancialContext


SYSTEM_INSTRUCTION = """You are an expert CFO and financial advisor AI assistant. You provide clear, actionable financial advice and insights.

Your role is to:
- Analyze financial data and provide strategic recommendations
- Identify potential risks and opportunities
- Suggest cost optimization strategies
- Recommend revenue growth initiatives
- Provide cash flow management advice
- Offer industry best practices and benchmarks

Keep your responses concise, practical, and focused on actionable insights. Use bullet points for clarity when appropriate."""

INSIGHTS_PROMPT = """Based on the current financial metrics, provide 3-4 key insights and recommendations for improvement. Focus on:
1. Cash flow optimization
2. Revenue growth opportunities
3. Cost reduction strategies
4. Risk assessment and mitigation"""

NOT_AVAILABLE = "N/A"


def _money(value: Optional[float]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"${value:,.0f}"


def _plain(value: Optional[float], fmt: str = "{}") -> str:
    if value is None:
        return NOT_AVAILABLE
    return fmt.format(value)


def format_context_block(context: FinancialContext) -> str:
    """Render the financial context as labeled lines."""
    lines = [
        "Current Financial Context:",
        f"- Current Revenue: {_money(context.current_revenue)}",
        f"- Projected Revenue: {_money(context.projected_revenue)}",
        f"- Monthly Expenses: {_money(context.expenses)}",
        f"- Growth Rate: {_plain(context.growth_rate, '{:.1f}')}%",
        f"- Time Horizon: {_plain(context.time_horizon)} months",
        f"- Cash Flow: {_money(context.cash_flow)}",
        f"- Profit Margin: {_plain(context.profit_margin, '{:.2f}')}%",
        "",
        "Please consider this financial data when providing your advice.",
    ]
    return "\n".join(lines)


def format_history(history: Sequence[ChatMessage], window: int) -> str:
    """Render the most recent `window` messages, oldest first."""
    if window <= 0:
        return ""
    recent = list(history)[-window:]
    return "\n".join(
        f"{'User' if msg.is_user else 'Assistant'}: {msg.content}"
        for msg in recent
    )


def build_prompt(
    user_message: str,
    history: Sequence[ChatMessage],
    context: Optional[FinancialContext] = None,
    window: int = 5,
) -> str:
    """
    Build the complete prompt for one advisor turn.

    `history` holds the turns before this one; the new message is appended
    separately so it is never duplicated.
    """
    parts: List[str] = [SYSTEM_INSTRUCTION, ""]

    if context is not None:
        parts.append(format_context_block(context))
        parts.append("")

    conversation = format_history(history, window)
    if conversation:
        parts.append("Previous conversation:")
        parts.append(conversation)
        parts.append("")

    parts.append(f"User: {user_message}")
    parts.append("")
    parts.append("Assistant:")

    return "\n".join(parts)
