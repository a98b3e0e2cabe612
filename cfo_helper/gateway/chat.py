"""Advisor chat history gateway."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cfo_helper.gateway.result import GatewayResult
from cfo_helper.models import AiChatMessage

logger = logging.getLogger(__name__)


async def save_chat_message(
    db: AsyncSession,
    user_id: str,
    session_id: str,
    message: str,
    is_user: bool,
    financial_context: Optional[Dict[str, Any]] = None,
) -> GatewayResult[AiChatMessage]:
    try:
        row = AiChatMessage(
            user_id=user_id,
            session_id=session_id,
            message=message,
            is_user=is_user,
            financial_context=financial_context,
        )
        db.add(row)
        await db.commit()
        await db.refresh(row)
        return GatewayResult.ok(row)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error saving chat message for {user_id}: {e}")
        return GatewayResult.fail(e)


async def get_chat_history(
    db: AsyncSession,
    user_id: str,
    session_id: str,
) -> GatewayResult[List[AiChatMessage]]:
    """Messages for one chat session, oldest first."""
    try:
        result = await db.execute(
            select(AiChatMessage)
            .where(
                AiChatMessage.user_id == user_id,
                AiChatMessage.session_id == session_id,
            )
            .order_by(AiChatMessage.created_at.asc())
        )
        return GatewayResult.ok(list(result.scalars().all()))
    except Exception as e:
        logger.error(f"Error getting chat history for {user_id}/{session_id}: {e}")
        return GatewayResult.fail(e)
