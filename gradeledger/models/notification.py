"""Notification model."""

from sqlalchemy import Column, String, Text, DateTime, JSON, Enum as SQLEnum
from sqlalchemy.sql import func
import uuid

from ..database import Base
from .enums import NotificationChannel, NotificationStatus


class Notification(Base):
    """Outbound message recorded by the notification sink."""
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    type = Column(String(100), nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    channel = Column(SQLEnum(NotificationChannel), nullable=False, default=NotificationChannel.email)
    status = Column(SQLEnum(NotificationStatus), nullable=False, default=NotificationStatus.pending)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    error = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Notification(id={self.id}, type='{self.type}', status={self.status})>"

    @property
    def is_sent(self):
        return self.status == NotificationStatus.sent
