"""
Trip database model.

A trip is one vehicle movement, opened from a QR scan or a stage entry and
closed on unloading, explicit end, or cancellation.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey, Enum, Index, text
from fleet_tracker.app.db.session import Base
from fleet_tracker.app.models.enums import TripStatus, SelectionType, enum_values


class Trip(Base):
    """
    Trip model.

    Project and selection names are point-in-time copies of the referenced
    dropdown options and are never refreshed after creation.
    """
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    qr_code = Column(String(255), nullable=True)
    vehicle_number = Column(String(50), nullable=False, index=True)

    project_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=False)
    project_name = Column(String(200), nullable=False)
    selection_type = Column(
        Enum(SelectionType, name="selection_type", values_callable=enum_values),
        nullable=False,
    )
    selection_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=False)
    selection_name = Column(String(200), nullable=False)

    status = Column(
        Enum(TripStatus, name="trip_status", values_callable=enum_values),
        default=TripStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    start_time = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=True)

    start_latitude = Column(Float, nullable=True)
    start_longitude = Column(Float, nullable=True)
    end_latitude = Column(Float, nullable=True)
    end_longitude = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Only one active trip per vehicle
    __table_args__ = (
        Index(
            "uq_trips_active_vehicle",
            "vehicle_number",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
        Index("ix_trips_user_status", "user_id", "status"),
    )

    def __repr__(self):
        return f"<Trip(id={self.id}, vehicle_number='{self.vehicle_number}', status='{self.status.value}')>"
