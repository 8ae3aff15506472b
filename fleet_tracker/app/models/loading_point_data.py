"""
Loading point capture model.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum
from fleet_tracker.app.db.session import Base
from fleet_tracker.app.models.enums import LoadingStatus, enum_values


class LoadingPointData(Base):
    """Record of a vehicle checking in at a loading point."""
    __tablename__ = "loading_point_data"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="SET NULL"), nullable=True, index=True)
    qr_code = Column(String(255), nullable=True)
    vehicle_number = Column(String(50), nullable=False, index=True)

    loading_point_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=False)
    loading_point_name = Column(String(200), nullable=False)
    project_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=False)
    project_name = Column(String(200), nullable=False)
    transporter_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=False)
    transporter_name = Column(String(200), nullable=False)

    notes = Column(Text, nullable=True)
    status = Column(
        Enum(LoadingStatus, name="loading_status", values_callable=enum_values),
        default=LoadingStatus.STARTED,
        nullable=False,
    )

    timestamp = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
