"""Match SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import (
    Column, Text, ForeignKey, Integer, Boolean, DateTime, Uuid,
    CheckConstraint, UniqueConstraint, Index,
)
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin


class Match(TimestampMixin, Base):
    """Scored pairing of one buy request with one product listing.

    At most one match exists per (buy_request_id, product_id); concurrent
    matching runs rely on uq_match_request_product instead of locking.

    Status values:
    - PENDING: Created by the matching engine
    - ACCEPTED: Accepted by buyer or seller (terminal)
    - REJECTED: Rejected by buyer or seller (terminal)
    """
    __tablename__ = "match"
    __table_args__ = (
        UniqueConstraint("buy_request_id", "product_id", name="uq_match_request_product"),
        CheckConstraint("ai_score >= 0 AND ai_score <= 100", name="ck_match_score_range"),
        CheckConstraint(
            "status IN ('PENDING', 'ACCEPTED', 'REJECTED')",
            name="ck_match_status"
        ),
        CheckConstraint("buyer_id <> seller_id", name="ck_match_distinct_parties"),
        Index("ix_match_buyer_id", "buyer_id"),
        Index("ix_match_seller_id", "seller_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    buy_request_id = Column(Uuid, ForeignKey("buy_request.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid, ForeignKey("product.id", ondelete="CASCADE"), nullable=False)
    buyer_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    seller_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    ai_score = Column(Integer, nullable=False)
    match_reason = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="PENDING")

    # Per-party view tracking
    buyer_viewed = Column(Boolean, nullable=False, default=False)
    buyer_viewed_at = Column(DateTime(timezone=True), nullable=True)
    seller_viewed = Column(Boolean, nullable=False, default=False)
    seller_viewed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    buy_request = relationship("BuyRequest")
    product = relationship("Product")
