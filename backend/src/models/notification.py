"""Notification SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Text, ForeignKey, Boolean, DateTime, Uuid, Index
from sqlalchemy.sql import func

from .base import Base, PortableJSONB


class Notification(Base):
    """In-app notification delivered to one user.

    Rows are written by the notification sink from engine-produced
    intents; push/SMS/email fan-out reads from here.
    """
    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_user_read", "user_id", "is_read"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    type = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    title_am = Column(Text, nullable=True)
    message = Column(Text, nullable=False)
    message_am = Column(Text, nullable=True)
    action_url = Column(Text, nullable=True)
    metadata_json = Column(PortableJSONB, nullable=False, default=dict)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
