from enum import Enum as PyEnum

from sqlalchemy import Column, Integer, String, Text, ForeignKey

from .base import Base


class RsoStatus(str, PyEnum):
    """RSO status. New RSOs start ACTIVE."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class RsoModel(Base):
    __tablename__ = "rsos"

    rso_id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    college_id = Column(
        Integer, ForeignKey("colleges.college_id"), index=True, nullable=False
    )
    admin_id = Column(Integer, ForeignKey("users.user_id"), index=True, nullable=False)
    status = Column(String(20), nullable=False, default=RsoStatus.ACTIVE.value)
    created_at = Column(String, nullable=False)
