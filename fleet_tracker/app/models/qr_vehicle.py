"""
QR vehicle association model.

One row per physical QR code, binding it to a vehicle number and,
optionally, a transporter.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from fleet_tracker.app.db.session import Base


class QRVehicle(Base):
    """
    QR code to vehicle mapping.

    The vehicle number bound to a QR code is overwritten on re-association,
    never versioned.
    """
    __tablename__ = "qr_vehicles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    qr_code = Column(String(255), unique=True, nullable=False, index=True)
    vehicle_number = Column(String(50), nullable=True, index=True)

    transporter_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=True)
    transporter_name = Column(String(200), nullable=True)

    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    last_used_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    last_used_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<QRVehicle(qr_code='{self.qr_code}', vehicle_number='{self.vehicle_number}')>"
