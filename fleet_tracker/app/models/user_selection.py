"""
Saved project/stage selection model.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, Enum
from fleet_tracker.app.db.session import Base
from fleet_tracker.app.models.enums import SelectionType, enum_values


class UserSelection(Base):
    """
    A user's chosen project plus a typed selection.

    Saving a new selection deactivates the user's previous active one.
    """
    __tablename__ = "user_selections"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    project_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=False)
    selection_type = Column(
        Enum(SelectionType, name="selection_type", values_callable=enum_values),
        nullable=False,
    )
    selection_id = Column(Integer, ForeignKey("dropdown_options.id"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
