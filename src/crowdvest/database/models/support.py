"""Support ticket, message and notification models."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Boolean,
    JSON,
    Index,
)
from sqlalchemy.orm import relationship

from crowdvest.database.models.base import Base, TimestampMixin, now_utc


class SupportTicket(TimestampMixin, Base):
    """A support conversation between a user and the admin team.

    ``unread_by_user_count``/``unread_by_admin_count`` are cached counters
    maintained by message writes.
    """

    __tablename__ = "support_tickets"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    assigned_to_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    subject = Column(String(255), nullable=False)
    category = Column(String(50), nullable=True)
    priority = Column(String(10), default="medium", nullable=False)  # low, medium, high, urgent
    status = Column(String(20), default="open", nullable=False)  # open, in_progress, resolved, closed
    unread_by_user_count = Column(Integer, default=0, nullable=False)
    unread_by_admin_count = Column(Integer, default=0, nullable=False)
    resolved_at = Column(DateTime, nullable=True)
    closed_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", foreign_keys=[user_id])
    assigned_to = relationship("User", foreign_keys=[assigned_to_id])
    messages = relationship(
        "SupportMessage",
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="SupportMessage.id",
    )

    @classmethod
    def unresolved(cls):
        return cls.status.in_(("open", "in_progress"))


class SupportMessage(TimestampMixin, Base):
    """A message on a support ticket."""

    __tablename__ = "support_messages"

    id = Column(Integer, primary_key=True)
    ticket_id = Column(Integer, ForeignKey("support_tickets.id"), nullable=False)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    sender_type = Column(String(10), nullable=False)  # user, admin
    body = Column(Text, nullable=False)
    attachments = Column(JSON, nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime, nullable=True)

    # Relationships
    ticket = relationship("SupportTicket", back_populates="messages")
    sender = relationship("User")

    @classmethod
    def unread(cls):
        return cls.is_read.is_(False)


class Notification(Base):
    """In-app notification for a user."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    notification_type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON, nullable=True)
    action_url = Column(String(500), nullable=True)
    read_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=now_utc, nullable=False)

    __table_args__ = (Index("ix_notifications_user_read", "user_id", "read_at"),)

    # Relationships
    user = relationship("User", back_populates="notifications")

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    @classmethod
    def unread(cls):
        return cls.read_at.is_(None)


class NotificationLog(Base):
    """Delivery log for outbound email/SMS/push notifications."""

    __tablename__ = "notification_logs"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    channel = Column(String(10), nullable=False)  # email, sms, push
    template = Column(String(100), nullable=True)
    recipient = Column(String(255), nullable=False)
    status = Column(String(20), default="queued", nullable=False)  # queued, sent, failed
    provider_message_id = Column(String(255), nullable=True)
    error_message = Column(Text, nullable=True)
    sent_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=now_utc, nullable=False)

    # Relationships
    user = relationship("User")
