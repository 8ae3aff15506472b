"""
Device telemetry model.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, Float, Boolean, DateTime, ForeignKey, Enum, Index
from fleet_tracker.app.db.session import Base
from fleet_tracker.app.models.enums import ActivityType, enum_values


class Location(Base):
    """
    One telemetry sample. Append-only.

    ``timestamp`` is the client-supplied capture time when present, the
    server receive time otherwise.
    """
    __tablename__ = "locations"
    __table_args__ = (
        Index("ix_locations_user_timestamp", "user_id", "timestamp"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    accuracy = Column(Float, nullable=True)
    altitude = Column(Float, nullable=True)
    speed = Column(Float, nullable=True)
    heading = Column(Float, nullable=True)
    battery_level = Column(Integer, nullable=True)
    battery_charging = Column(Boolean, nullable=True)
    activity = Column(
        Enum(ActivityType, name="activity_type", values_callable=enum_values),
        default=ActivityType.UNKNOWN,
        nullable=False,
    )

    timestamp = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
