from sqlalchemy import Column, DateTime, Integer, Text, ForeignKey

from .base import Base


class CommentModel(Base):
    __tablename__ = "comments"

    comment_id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.event_id"), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), index=True, nullable=False)
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
