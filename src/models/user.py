"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import Column, Integer, String, ForeignKey

from .base import Base


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    role = Column(String, nullable=False)  # 'STUDENT', 'ADMIN' or 'SUPER_ADMIN'
    display_name = Column(String, nullable=True)
    # Nulled, not deleted, when the college goes away
    college_id = Column(
        Integer, ForeignKey("colleges.college_id"), index=True, nullable=True
    )
    create_at = Column(String, nullable=False)  # ISO format string
