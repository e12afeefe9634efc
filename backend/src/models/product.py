"""Product (listing) SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Text, ForeignKey, Numeric, Integer, Uuid, Index
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin


class Product(TimestampMixin, Base):
    """Seller-authored product listing available for matching.

    Only ACTIVE listings are matching candidates. Category and status hold
    the string values of models.enums.Category / ListingStatus.
    """
    __tablename__ = "product"
    __table_args__ = (
        Index("ix_product_category_status", "category", "status"),
        Index("ix_product_user_id", "user_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    category = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    title_am = Column(Text, nullable=True)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(18, 2), nullable=False)
    currency = Column(Text, nullable=False, default="ETB")
    quantity = Column(Integer, nullable=True)
    unit = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="ACTIVE")
    # Relationships
    user = relationship("User")

    def to_dict(self):
        """Convert product to dictionary representation"""
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "category": self.category,
            "title": self.title,
            "title_am": self.title_am,
            "description": self.description,
            "price": float(self.price),
            "currency": self.currency,
            "quantity": self.quantity,
            "unit": self.unit,
            "location": self.location,
            "status": self.status,
        }
