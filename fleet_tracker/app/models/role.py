"""
Role database model.

Roles are named permission sets assigned to users.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON
from fleet_tracker.app.db.session import Base


class Role(Base):
    """
    Role model.

    ``permissions`` holds a JSON list of ``Permission`` values. At most one
    role carries ``is_default``; ``is_system`` roles cannot be edited or
    deleted through the API.
    """
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False)
    description = Column(String(200), nullable=True)
    permissions = Column(JSON, nullable=False, default=list)
    is_default = Column(Boolean, default=False, nullable=False, index=True)
    is_system = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Role(id={self.id}, name='{self.name}', is_default={self.is_default})>"
