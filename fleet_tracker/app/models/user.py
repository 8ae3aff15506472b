"""
User database model.

This module defines the User SQLAlchemy model for authentication.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from fleet_tracker.app.db.session import Base


class User(Base):
    """
    User model for authentication and user management.

    Admin console access is granted by ``is_admin``; creating further admins
    additionally requires ``is_super_admin``.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # Always stored lower-cased so uniqueness is case-insensitive
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)

    role_id = Column(Integer, ForeignKey("roles.id"), nullable=True, index=True)

    is_admin = Column(Boolean, default=False, nullable=False, index=True)
    is_super_admin = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', is_admin={self.is_admin})>"
