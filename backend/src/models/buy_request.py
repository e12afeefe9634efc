"""Buy request SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Text, ForeignKey, Numeric, Integer, Uuid, Index
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin


class BuyRequest(TimestampMixin, Base):
    """Buyer-authored statement of demand.

    The matching engine reads buy requests but never writes them.
    Only ACTIVE requests are eligible for matching.
    """
    __tablename__ = "buy_request"
    __table_args__ = (
        Index("ix_buy_request_status", "status"),
        Index("ix_buy_request_user_id", "user_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    category = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    title_am = Column(Text, nullable=True)
    description = Column(Text, nullable=False, default="")
    min_budget = Column(Numeric(18, 2), nullable=True)
    max_budget = Column(Numeric(18, 2), nullable=True)
    quantity = Column(Integer, nullable=True)
    unit = Column(Text, nullable=True)
    location = Column(Text, nullable=False)
    urgency = Column(Text, nullable=False, default="NORMAL")
    status = Column(Text, nullable=False, default="ACTIVE")
    # Relationships
    user = relationship("User")
