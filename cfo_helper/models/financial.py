"""Financial records: snapshots, simulations, transactions and monthly reports."""
from sqlalchemy import Column, String, DateTime, Date, Integer, Float, Text, ForeignKey
from sqlalchemy.sql import func

from cfo_helper.database import Base, JSONType
from cfo_helper.models.base import generate_id


class FinancialSnapshot(Base):
    """Latest saved dashboard inputs and headline figures for a user."""

    __tablename__ = "financial_data"

    id = Column(String, primary_key=True, default=lambda: generate_id("fin"))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    current_funds = Column(Float, nullable=False, default=0)
    monthly_revenue = Column(Float, nullable=False, default=0)
    monthly_expenses = Column(Float, nullable=False, default=0)
    employees = Column(Integer, nullable=False, default=0)
    marketing_spend = Column(Float, nullable=False, default=0)
    product_price = Column(Float, nullable=False, default=0)
    misc_expenses = Column(Float, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class Simulation(Base):
    """A named, saved simulation run (inputs and results as JSON)."""

    __tablename__ = "simulations"

    id = Column(String, primary_key=True, default=lambda: generate_id("sim"))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    inputs = Column(JSONType, nullable=False, default=dict)
    results = Column(JSONType, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Transaction(Base):
    """A single income/expense/investment/withdrawal entry."""

    __tablename__ = "transactions"

    id = Column(String, primary_key=True, default=lambda: generate_id("txn"))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False)  # income, expense, investment, withdrawal
    amount = Column(Float, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)
    date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class MonthlyReport(Base):
    """Aggregated figures for one calendar month."""

    __tablename__ = "monthly_reports"

    id = Column(String, primary_key=True, default=lambda: generate_id("rpt"))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    total_revenue = Column(Float, nullable=False, default=0)
    total_expenses = Column(Float, nullable=False, default=0)
    net_profit = Column(Float, nullable=False, default=0)
    cash_flow = Column(JSONType, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
