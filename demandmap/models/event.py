"""Uploaded demand events, stored per user."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from demandmap.database import Base, utc_now


class DemandEventRecord(Base):
    """A demand event as submitted by a user.

    Coordinates are kept as the exact decimal strings that were uploaded so
    nothing is lost to float rounding on the way back out.
    """

    __tablename__ = "demand_events"
    __table_args__ = (Index("ix_demand_events_user_timestamp", "user_id", "timestamp"),)

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    latitude: Mapped[str] = mapped_column(String(32), nullable=False)
    longitude: Mapped[str] = mapped_column(String(32), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
    )
