"""User SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Text, Boolean, Uuid, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import validates
import re

from .base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """Marketplace participant acting as buyer, seller, or both.

    Authentication is handled upstream; the backend only needs the identity,
    display fields, and the verification flag used as a trust signal.
    """
    __tablename__ = "user"

    id = Column(Uuid, primary_key=True, default=uuid4)
    email = Column(Text, nullable=False)
    first_name = Column(Text, nullable=True)
    last_name = Column(Text, nullable=True)
    business_name = Column(Text, nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    status = Column(Text, nullable=False, default="ACTIVE")
    # Constraints
    __table_args__ = (
        CheckConstraint(
            "status IN ('ACTIVE', 'DISABLED')",
            name='ck_user_status'
        ),
        UniqueConstraint('email', name='uq_user_email')
    )

    @validates('email')
    def validate_email(self, key, value):
        """Basic email format validation"""
        if not re.match(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$', value):
            raise ValueError("Invalid email format")
        return value.lower()

    def to_dict(self):
        """Convert user to its public profile representation"""
        return {
            "id": str(self.id),
            "first_name": self.first_name,
            "last_name": self.last_name,
            "business_name": self.business_name,
            "is_verified": self.is_verified,
        }
