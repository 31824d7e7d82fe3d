"""Notification model — per-recipient inbox rows."""

from sqlalchemy import Column, String, Text, Boolean, Integer, BigInteger, Index

from ..database import Base, now_ms


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_undelivered", "recipient_id", "delivered"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipient_id = Column(String, nullable=False, index=True)
    sender_id = Column(String, nullable=False)
    task_id = Column(String, nullable=True)
    message_id = Column(String, nullable=True)
    content = Column(Text, nullable=False)
    delivered = Column(Boolean, nullable=False, default=False)
    created_at = Column(BigInteger, nullable=False, default=now_ms)
