from sqlalchemy import CheckConstraint, Column, Integer, ForeignKey

from .base import Base


class RatingModel(Base):
    """At most one rating per (user, event); re-rating overwrites the value."""

    __tablename__ = "ratings"
    __table_args__ = (
        CheckConstraint("rating_value BETWEEN 1 AND 5", name="ck_ratings_value_range"),
    )

    user_id = Column(Integer, ForeignKey("users.user_id"), primary_key=True)
    event_id = Column(
        Integer, ForeignKey("events.event_id"), primary_key=True, index=True
    )
    rating_value = Column(Integer, nullable=False)
