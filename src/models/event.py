"""Event database models.

A base event row plus exactly one variant row keyed by the same event_id.
The variant table is chosen by ``EventModel.event_type``.
"""

from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
)

from .base import Base


class EventType(str, PyEnum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    RSO = "RSO"


class EventModel(Base):
    __tablename__ = "events"

    event_id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    location_id = Column(Integer, ForeignKey("locations.location_id"), nullable=False)
    college_id = Column(
        Integer, ForeignKey("colleges.college_id"), index=True, nullable=False
    )
    created_by = Column(Integer, ForeignKey("users.user_id"), index=True, nullable=False)
    event_type = Column(String(20), nullable=False)
    contact_phone = Column(String(20), nullable=True)
    contact_email = Column(String, nullable=True)


class PublicEventModel(Base):
    """Visible to everyone once approved."""

    __tablename__ = "public_events"

    event_id = Column(Integer, ForeignKey("events.event_id"), primary_key=True)
    approved = Column(Boolean, nullable=False, default=False)
    approver_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)


class PrivateEventModel(Base):
    """Visible to users of the event's college."""

    __tablename__ = "private_events"

    event_id = Column(Integer, ForeignKey("events.event_id"), primary_key=True)
    admin_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)


class RsoEventModel(Base):
    """Visible to members of the hosting RSO."""

    __tablename__ = "rso_events"

    event_id = Column(Integer, ForeignKey("events.event_id"), primary_key=True)
    rso_id = Column(Integer, ForeignKey("rsos.rso_id"), index=True, nullable=False)


# Variant table per event type
VARIANT_MODELS = {
    EventType.PUBLIC: PublicEventModel,
    EventType.PRIVATE: PrivateEventModel,
    EventType.RSO: RsoEventModel,
}
