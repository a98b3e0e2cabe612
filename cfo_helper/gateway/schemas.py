"""Pydantic schemas for persisted records."""
from pydantic import BaseModel, Field
from datetime import date as date_type, datetime
from typing import Optional, List, Dict, Any, Literal


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    company_name: Optional[str] = None
    industry: Optional[str] = None
    organization_type: Optional[str] = None
    team_size: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FinancialDataUpdate(BaseModel):
    """Schema for saving a financial snapshot."""
    current_funds: float = Field(0, ge=0)
    monthly_revenue: float = Field(0, ge=0)
    monthly_expenses: float = Field(0, ge=0)
    employees: int = Field(0, ge=0)
    marketing_spend: float = Field(0, ge=0)
    product_price: float = Field(0, ge=0)
    misc_expenses: float = Field(0, ge=0)


class FinancialDataResponse(FinancialDataUpdate):
    id: str
    user_id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SimulationCreate(BaseModel):
    """Save the current dashboard run under a name."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class SimulationResponse(BaseModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    inputs: Dict[str, Any]
    results: Dict[str, Any]
    created_at: datetime

    model_config = {"from_attributes": True}


TransactionType = Literal["income", "expense", "investment", "withdrawal"]


class TransactionCreate(BaseModel):
    type: TransactionType
    amount: float = Field(..., ge=0)
    description: Optional[str] = None
    category: Optional[str] = None
    date: date_type


class TransactionUpdate(BaseModel):
    type: Optional[TransactionType] = None
    amount: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    category: Optional[str] = None
    date: Optional[date_type] = None


class TransactionResponse(BaseModel):
    id: str
    user_id: str
    type: str
    amount: float
    description: Optional[str] = None
    category: Optional[str] = None
    date: date_type
    created_at: datetime

    model_config = {"from_attributes": True}


class MonthlyReportCreate(BaseModel):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900)
    total_revenue: float = Field(..., ge=0)
    total_expenses: float = Field(..., ge=0)
    cash_flow: Optional[Dict[str, Any]] = None


class MonthlyReportResponse(BaseModel):
    id: str
    user_id: str
    month: int
    year: int
    total_revenue: float
    total_expenses: float
    net_profit: float
    cash_flow: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ChatArchiveEntry(BaseModel):
    message: str
    is_user: bool
    financial_context: Optional[Dict[str, Any]] = None


class ChatArchiveRequest(BaseModel):
    """Persist a batch of chat turns under a session id."""
    messages: List[ChatArchiveEntry]


class ChatHistoryRow(BaseModel):
    id: str
    session_id: str
    message: str
    is_user: bool
    financial_context: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class CashFlowSummary(BaseModel):
    total_income: float
    total_expenses: float
    net_cash_flow: float


class FinancialSummaryResponse(BaseModel):
    financial_data: Optional[FinancialDataResponse] = None
    recent_transactions: List[TransactionResponse] = Field(default_factory=list)
    simulation_count: int
    cash_flow_summary: CashFlowSummary
