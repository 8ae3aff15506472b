"""
Anomaly records for broken stage sequences.

Both tables are append-only from the workflow's point of view and are read
back only by the admin reports.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum
from fleet_tracker.app.db.session import Base
from fleet_tracker.app.models.enums import SelectionType, enum_values


DEFAULT_MISSING_LOADING_REASON = "Loading point entry missing"


class MissingLoadingPointEntry(Base):
    """An unloading happened with no loading-stage record for the trip."""
    __tablename__ = "missing_loading_point_entries"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    vehicle_number = Column(String(50), nullable=False, index=True)
    qr_code = Column(String(255), nullable=True)

    unloading_point_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=True)
    unloading_point_name = Column(String(200), nullable=True)
    project_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=True)
    project_name = Column(String(200), nullable=True)

    reason = Column(Text, nullable=False, default=DEFAULT_MISSING_LOADING_REASON)
    timestamp = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class MissingUnloadingPointEntry(Base):
    """
    A trip was superseded by a new stage start before it was unloaded.

    Snapshots the superseded trip together with the caller's reason.
    """
    __tablename__ = "missing_unloading_point_entries"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="SET NULL"), nullable=True, index=True)
    vehicle_number = Column(String(50), nullable=False, index=True)
    qr_code = Column(String(255), nullable=True)

    previous_project_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=True)
    previous_project_name = Column(String(200), nullable=True)
    previous_selection_type = Column(
        Enum(SelectionType, name="selection_type", values_callable=enum_values),
        nullable=True,
    )
    previous_selection_name = Column(String(200), nullable=True)
    trip_start_time = Column(DateTime(timezone=True), nullable=True)
    trip_end_time = Column(DateTime(timezone=True), nullable=True)

    reason = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
