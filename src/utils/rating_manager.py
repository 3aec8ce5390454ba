"""Rating management utilities."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import RATING_MAX, RATING_MIN
from core.exceptions import ForbiddenError, NotFoundError, ValidationError
from models.event import EventModel
from models.rating import RatingModel
from schemas.event import RatingSummary
from schemas.identity import Identity
from utils.event_variants import get_variant
from utils.rso_manager import RsoManager
from utils.visibility import can_view

logger = logging.getLogger(__name__)


class RatingManager:
    def __init__(self, db: Session):
        self.db = db

    def rate_event(self, event_id: int, actor: Identity, value: int) -> RatingSummary:
        """Rate an event, overwriting the actor's previous rating.

        The (user_id, event_id) primary key is the race boundary: if a
        concurrent request inserts first, this one updates that row instead.

        Raises:
            ValidationError: If the value is outside [RATING_MIN, RATING_MAX].
            NotFoundError: If the event does not exist.
            ForbiddenError: If the actor cannot see the event.
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"Rating must be an integer, got {value!r}")
        if not RATING_MIN <= value <= RATING_MAX:
            raise ValidationError(
                f"Rating must be between {RATING_MIN} and {RATING_MAX}, got {value}"
            )
        event = self.db.query(EventModel).filter(EventModel.event_id == event_id).first()
        if not event:
            raise NotFoundError("Event", event_id)
        if not can_view(actor, event, get_variant(self.db, event), RsoManager(self.db)):
            raise ForbiddenError("You do not have permission to view this event")

        key = (actor.user_id, event_id)
        rating = self.db.get(RatingModel, key)
        if rating is None:
            self.db.add(
                RatingModel(user_id=actor.user_id, event_id=event_id, rating_value=value)
            )
        else:
            rating.rating_value = value
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            rating = self.db.get(RatingModel, key, populate_existing=True)
            if rating is None:
                raise
            rating.rating_value = value
            self.db.commit()

        logger.info("User %s rated event %s: %s", actor.user_id, event_id, value)
        return self.get_event_rating(event_id)

    def get_event_rating(self, event_id: int) -> RatingSummary:
        """Average and count of this event's ratings."""
        average, total = (
            self.db.query(
                func.avg(RatingModel.rating_value), func.count(RatingModel.user_id)
            )
            .filter(RatingModel.event_id == event_id)
            .one()
        )
        return RatingSummary(
            event_id=event_id,
            average_rating=float(average) if average is not None else 0.0,
            total_ratings=total or 0,
        )
