"""User profile model."""
from sqlalchemy import Column, String, DateTime, Integer
from sqlalchemy.sql import func

from cfo_helper.database import Base


class User(Base):
    """
    User profile mirrored from the identity provider.

    The id is the identity provider's opaque user id, so it is never generated here.
    """

    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, index=True)
    full_name = Column(String, nullable=True)
    company_name = Column(String, nullable=True)
    industry = Column(String, nullable=True)
    organization_type = Column(String, nullable=True)  # startup, enterprise, event, freelance, other
    team_size = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
