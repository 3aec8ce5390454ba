from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint

from .base import Base


class RsoMembershipModel(Base):
    """One row per (user, RSO). The unique key is the race-safety boundary for joins."""

    __tablename__ = "rso_memberships"
    __table_args__ = (
        UniqueConstraint("user_id", "rso_id", name="uq_rso_memberships_user_rso"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), index=True, nullable=False)
    rso_id = Column(Integer, ForeignKey("rsos.rso_id"), index=True, nullable=False)
    joined_at = Column(String, nullable=False)
