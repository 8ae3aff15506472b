"""
Way bridge capture model.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from fleet_tracker.app.db.session import Base


class WayBridgeData(Base):
    """
    Weighbridge reading recorded when a vehicle starts at a way bridge.

    ``net_weight`` is always ``gross_weight - tare_weight``.
    """
    __tablename__ = "way_bridge_data"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="SET NULL"), nullable=True, index=True)
    qr_code = Column(String(255), nullable=True)
    vehicle_number = Column(String(50), nullable=False, index=True)

    way_bridge_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=False)
    way_bridge_name = Column(String(200), nullable=False)
    project_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=False)
    project_name = Column(String(200), nullable=False)
    transporter_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=False)
    transporter_name = Column(String(200), nullable=False)
    loading_point_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=False)
    loading_point_name = Column(String(200), nullable=False)

    weigh_bridge_slip_no = Column(String(100), nullable=True)
    loading_point_slip_no = Column(String(100), nullable=True)
    gross_weight = Column(Float, nullable=False)
    tare_weight = Column(Float, nullable=False)
    net_weight = Column(Float, nullable=False)

    timestamp = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def compute_net_weight(self):
        self.net_weight = self.gross_weight - self.tare_weight
        return self.net_weight
