"""Advisor Pydantic schemas for request/response validation."""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum

from cfo_helper.models.base import generate_id


class ChatMessage(BaseModel):
    """A single advisor chat turn."""
    id: str = Field(default_factory=lambda: generate_id("chat"))
    content: str = Field(..., description="Message text")
    is_user: bool = Field(..., description="True for user turns, False for advisor turns")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    is_fallback: bool = Field(False, description="True when the advisor answered with a canned message")


class FinancialContext(BaseModel):
    """Snapshot of the dashboard numbers used to ground the advisor."""
    current_revenue: Optional[float] = None
    projected_revenue: Optional[float] = None
    expenses: Optional[float] = None
    growth_rate: Optional[float] = None
    time_horizon: Optional[int] = None
    cash_flow: Optional[float] = None
    profit_margin: Optional[float] = None


# ============================================================================
# GENERATION PARAMETERS
# ============================================================================

class HarmCategory(str, Enum):
    """Content categories with configurable blocking."""
    HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"


class HarmBlockThreshold(str, Enum):
    """Blocking thresholds understood by the model provider."""
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    BLOCK_NONE = "BLOCK_NONE"


class SafetySetting(BaseModel):
    category: HarmCategory
    threshold: HarmBlockThreshold = HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE


def default_safety_settings() -> List[SafetySetting]:
    return [
        SafetySetting(category=HarmCategory.HARASSMENT),
        SafetySetting(category=HarmCategory.HATE_SPEECH),
    ]


class GenerationConfig(BaseModel):
    """Sampling and safety parameters sent with every model call."""
    temperature: float = 0.7
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 1024
    safety_settings: List[SafetySetting] = Field(default_factory=default_safety_settings)


# ============================================================================
# CHAT REQUEST/RESPONSE
# ============================================================================

class ChatRequest(BaseModel):
    """Request to send a message to the advisor."""
    message: str = Field(..., description="User's message")
    include_context: bool = Field(
        True,
        description="Ground the answer in the current dashboard numbers"
    )


class ChatResponse(BaseModel):
    """The advisor's reply."""
    message: ChatMessage
    model: Optional[str] = Field(None, description="Model that produced the reply, if any")


class ChatHistoryResponse(BaseModel):
    """In-memory conversation for the current session."""
    messages: List[ChatMessage] = Field(default_factory=list)


class ConnectionStatus(BaseModel):
    """Result of a connectivity check against the current model."""
    connected: bool
    model: str
