"""Advisor API routes.

Endpoints:
- POST /advisor/chat - Send a message
- POST /advisor/insights - Ask for insights on the current numbers
- GET /advisor/history - Conversation so far
- DELETE /advisor/history - Clear the conversation
- GET /advisor/health - Check the current model
"""
from fastapi import APIRouter, Depends, HTTPException

from cfo_helper.errors import MessageValidationError, RateLimitError
from cfo_helper.advisor import schemas
from cfo_helper.dashboard.registry import get_dashboard_session
from cfo_helper.dashboard.session import DashboardSession


router = APIRouter()


@router.post("/chat", response_model=schemas.ChatResponse)
async def chat_with_advisor(
    request: schemas.ChatRequest,
    session: DashboardSession = Depends(get_dashboard_session),
):
    """
    Send a message to the advisor.

    The reply is always a message: if every model fails, a canned answer
    flagged with is_fallback is returned instead of an error. Only rate
    limiting (429) and invalid input (422) are reported as errors.
    """
    context = session.financial_context() if request.include_context else None
    try:
        message = await session.advisor.send_message(request.message, context)
    except RateLimitError as e:
        raise HTTPException(status_code=429, detail=str(e))
    except MessageValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return schemas.ChatResponse(message=message, model=session.advisor.last_model)


@router.post("/insights", response_model=schemas.ChatResponse)
async def generate_insights(session: DashboardSession = Depends(get_dashboard_session)):
    """Ask for 3-4 insights grounded in the current dashboard numbers."""
    try:
        message = await session.advisor.generate_insights(session.financial_context())
    except RateLimitError as e:
        raise HTTPException(status_code=429, detail=str(e))

    return schemas.ChatResponse(message=message, model=session.advisor.last_model)


@router.get("/history", response_model=schemas.ChatHistoryResponse)
async def get_history(session: DashboardSession = Depends(get_dashboard_session)):
    return schemas.ChatHistoryResponse(messages=session.advisor.get_history())


@router.delete("/history", status_code=204)
async def clear_history(session: DashboardSession = Depends(get_dashboard_session)):
    session.advisor.clear_history()


@router.get("/health", response_model=schemas.ConnectionStatus)
async def advisor_health(session: DashboardSession = Depends(get_dashboard_session)):
    """Check that the current model answers."""
    connected = await session.advisor.test_connection()
    return schemas.ConnectionStatus(connected=connected, model=session.advisor.current_model)
