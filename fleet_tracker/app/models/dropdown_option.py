"""
Dropdown option database model.

Configurable taxonomies: projects, way bridges, loading/unloading points and
transporters.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, Index
from fleet_tracker.app.db.session import Base
from fleet_tracker.app.models.enums import DropdownType, enum_values


class DropdownOption(Base):
    """
    Dropdown option model.

    Referenced by workflow records as a validated foreign-key target. Only
    admin CRUD mutates it.
    """
    __tablename__ = "dropdown_options"
    __table_args__ = (
        Index("ix_dropdown_options_type_active_order", "type", "is_active", "order"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    type = Column(
        Enum(DropdownType, name="dropdown_type", values_callable=enum_values),
        nullable=False,
        index=True,
    )
    name = Column(String(200), nullable=False)
    code = Column(String(50), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    order = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<DropdownOption(id={self.id}, type='{self.type.value}', name='{self.name}')>"
