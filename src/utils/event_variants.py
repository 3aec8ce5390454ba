"""Lookup helpers for the per-type variant tables."""

from typing import Optional

from sqlalchemy.orm import Session

from models.event import VARIANT_MODELS, EventModel, EventType
from utils.visibility import EventVariant


def variant_model_for(event_type):
    """Return the variant table class for an event type, or None if unknown."""
    try:
        return VARIANT_MODELS[EventType(event_type)]
    except ValueError:
        return None


def get_variant(db: Session, event: EventModel) -> Optional[EventVariant]:
    """Load the variant row matching the event's type, or None if missing."""
    model = variant_model_for(event.event_type)
    if model is None:
        return None
    return db.query(model).filter(model.event_id == event.event_id).first()


def delete_variant(db: Session, event_id: int, event_type) -> int:
    """Delete the variant row of an event and return how many rows went."""
    model = variant_model_for(event_type)
    if model is None:
        return 0
    return db.query(model).filter(model.event_id == event_id).delete()
