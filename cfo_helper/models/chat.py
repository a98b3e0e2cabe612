"""Advisor chat history model."""
from sqlalchemy import Column, String, DateTime, Text, Boolean, ForeignKey
from sqlalchemy.sql import func

from cfo_helper.database import Base, JSONType
from cfo_helper.models.base import generate_id


class AiChatMessage(Base):
    """
    A persisted advisor chat turn.

    The live advisor keeps its conversation in memory; rows here are only
    written when a client explicitly archives a session.
    """

    __tablename__ = "ai_chat_history"

    id = Column(String, primary_key=True, default=lambda: generate_id("msg"))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    session_id = Column(String, nullable=False, index=True)
    message = Column(Text, nullable=False)
    is_user = Column(Boolean, nullable=False)
    financial_context = Column(JSONType, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
