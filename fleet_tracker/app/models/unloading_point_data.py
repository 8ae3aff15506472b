"""
Unloading point capture model.

The terminal stage of a trip; may carry a photo of the unloading slip.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey
from fleet_tracker.app.db.session import Base


class UnloadingPointData(Base):
    """Unloading record, optionally with weights and an attached image."""
    __tablename__ = "unloading_point_data"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="SET NULL"), nullable=True, index=True)
    qr_code = Column(String(255), nullable=True)
    vehicle_number = Column(String(50), nullable=False, index=True)

    way_bridge_slip_no = Column(String(100), nullable=True)
    loading_point_slip_no = Column(String(100), nullable=True)
    loading_point_name = Column(String(200), nullable=True)
    way_bridge_name = Column(String(200), nullable=True)
    gross_weight = Column(Float, nullable=True)
    tare_weight = Column(Float, nullable=True)
    net_weight = Column(Float, nullable=True)

    unloading_point_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=False)
    unloading_point_name = Column(String(200), nullable=False)
    project_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=False)
    project_name = Column(String(200), nullable=False)

    notes = Column(Text, nullable=True)
    # Relative to the upload root, e.g. "unloading_point/<uuid>.jpg"
    image_path = Column(String(500), nullable=True)

    timestamp = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
