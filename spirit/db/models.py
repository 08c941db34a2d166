"""
Database models for the Spirit gateway

Only reflections are persisted; invite codes are held in process memory.
"""

from datetime import datetime, timezone
import uuid

from sqlalchemy import String, Text, DateTime, Float, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Reflection(Base):
    """
    A short note summarizing a conversation with Spirit.
    Written by clients after a chat, read back newest-first by admins.
    """
    __tablename__ = "reflections"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user: Mapped[str] = mapped_column(String(255), default="anonymous")
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(50), default="general")
    sentiment: Mapped[float] = mapped_column(Float, default=0.0)  # -1 (negative) .. 1 (positive)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index("ix_reflections_timestamp", "timestamp"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user": self.user,
            "summary": self.summary,
            "category": self.category,
            "sentiment": self.sentiment,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
