"""Event management utilities.

This module creates events together with their type-specific variant row,
reads them back through the visibility policy, and materializes them for
display with rating and comment aggregates.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from core.database import unit_of_work
from core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnresolvedReferenceError,
)
from models.college import CollegeModel
from models.event import (
    EventModel,
    EventType,
    PrivateEventModel,
    PublicEventModel,
    RsoEventModel,
)
from models.location import LocationModel
from models.rso import RsoModel
from schemas.event import EventCreate, EventDetails, EventUpdate
from schemas.identity import Identity
from utils.comment_manager import CommentManager
from utils.event_variants import get_variant
from utils.rating_manager import RatingManager
from utils.rso_manager import RsoManager
from utils.visibility import EventVariant, can_mutate, can_view

logger = logging.getLogger(__name__)


class EventManager:
    """Manages the base event row and its variant as one unit."""

    def __init__(self, db: Session):
        """Initialize EventManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db
        self.memberships = RsoManager(db)

    def create_event(self, request: EventCreate, actor: Identity) -> EventModel:
        """Create an event and exactly one matching variant row.

        Public events start unapproved unless the actor is a super admin, in
        which case they are approved by the actor immediately. Private events
        record the actor as their admin. RSO events resolve ``rso_id``.

        Both rows are written in one transaction; if anything fails neither
        row is kept.

        Args:
            request: Base fields plus the type and type-specific reference.
            actor: The creating user.

        Returns:
            The created EventModel.

        Raises:
            NotFoundError: If the college or location does not exist.
            UnresolvedReferenceError: If the RSO of an RSO event does not exist.
            ConflictError: If an RSO event's college differs from its RSO's.
            ForbiddenError: If a non-member tries to create an RSO event.
        """
        self._require(CollegeModel.college_id, request.college_id, "College")
        self._require(LocationModel.location_id, request.location_id, "Location")

        with unit_of_work(self.db):
            event = EventModel(
                name=request.name,
                description=request.description,
                date=request.date,
                time=request.time,
                location_id=request.location_id,
                college_id=request.college_id,
                created_by=actor.user_id,
                event_type=request.event_type.value,
                contact_phone=request.contact_phone,
                contact_email=request.contact_email,
            )
            self.db.add(event)
            self.db.flush()
            self.db.add(self._build_variant(event, request, actor))

        self.db.refresh(event)
        logger.info(
            "User %s created %s event %s", actor.user_id, event.event_type, event.event_id
        )
        return event

    def _build_variant(
        self, event: EventModel, request: EventCreate, actor: Identity
    ) -> EventVariant:
        if request.event_type == EventType.PUBLIC:
            if actor.is_super_admin:
                return PublicEventModel(
                    event_id=event.event_id, approved=True, approver_id=actor.user_id
                )
            return PublicEventModel(event_id=event.event_id, approved=False)

        if request.event_type == EventType.PRIVATE:
            return PrivateEventModel(event_id=event.event_id, admin_id=actor.user_id)

        rso = self.db.query(RsoModel).filter(RsoModel.rso_id == request.rso_id).first()
        if not rso:
            raise UnresolvedReferenceError("RSO", request.rso_id)
        if rso.college_id != request.college_id:
            raise ConflictError(
                f"RSO '{rso.rso_id}' belongs to college '{rso.college_id}', "
                f"not '{request.college_id}'"
            )
        if not actor.is_super_admin and not self.memberships.exists_by_user_and_rso(
            actor.user_id, rso.rso_id
        ):
            raise ForbiddenError("Only RSO members can create events for this RSO")
        return RsoEventModel(event_id=event.event_id, rso_id=rso.rso_id)

    def get_event_model(self, event_id: int) -> EventModel:
        model = self.db.query(EventModel).filter(EventModel.event_id == event_id).first()
        if not model:
            raise NotFoundError("Event", event_id)
        return model

    def get_variant(self, event: EventModel) -> Optional[EventVariant]:
        return get_variant(self.db, event)

    def get_rso_admin_id(self, variant: Optional[EventVariant]) -> Optional[int]:
        """Admin of the RSO hosting an RSO event, else None."""
        if not isinstance(variant, RsoEventModel):
            return None
        rso = self.db.query(RsoModel).filter(RsoModel.rso_id == variant.rso_id).first()
        return rso.admin_id if rso else None

    def can_view_event(self, actor: Identity, event_id: int) -> bool:
        event = self.get_event_model(event_id)
        return can_view(actor, event, self.get_variant(event), self.memberships)

    def can_mutate_event(self, actor: Identity, event_id: int) -> bool:
        event = self.get_event_model(event_id)
        variant = self.get_variant(event)
        return can_mutate(actor, event, variant, self.get_rso_admin_id(variant))

    def get_event(self, event_id: int, actor: Identity) -> EventDetails:
        """Get a visible event with its aggregates.

        Raises:
            NotFoundError: If the event does not exist.
            ForbiddenError: If the actor cannot see it.
        """
        event = self.get_event_model(event_id)
        variant = self.get_variant(event)
        if not can_view(actor, event, variant, self.memberships):
            raise ForbiddenError("You do not have permission to view this event")
        return self.materialize(event, variant)

    def list_events(
        self,
        actor: Identity,
        event_type: Optional[EventType] = None,
        college_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[EventDetails]:
        """List the events the actor can see, filtered and ordered by date."""
        query = self.db.query(EventModel)
        if event_type is not None:
            query = query.filter(EventModel.event_type == EventType(event_type).value)
        if college_id is not None:
            query = query.filter(EventModel.college_id == college_id)
        if start_date is not None:
            query = query.filter(EventModel.date >= start_date)
        if end_date is not None:
            query = query.filter(EventModel.date <= end_date)

        results = []
        for event in query.order_by(EventModel.date, EventModel.time).all():
            variant = self.get_variant(event)
            if can_view(actor, event, variant, self.memberships):
                results.append(self.materialize(event, variant))
        return results

    def list_rso_events(self, rso_id: int, actor: Identity) -> List[EventDetails]:
        """List the events hosted by an RSO. Members only."""
        self.memberships.get_rso(rso_id)
        if not actor.is_super_admin and not self.memberships.exists_by_user_and_rso(
            actor.user_id, rso_id
        ):
            raise ForbiddenError("You are not a member of this RSO")
        rows = (
            self.db.query(EventModel, RsoEventModel)
            .join(RsoEventModel, RsoEventModel.event_id == EventModel.event_id)
            .filter(RsoEventModel.rso_id == rso_id)
            .order_by(EventModel.date, EventModel.time)
            .all()
        )
        return [self.materialize(event, variant) for event, variant in rows]

    def update_event(
        self, event_id: int, request: EventUpdate, actor: Identity
    ) -> EventDetails:
        """Apply a partial update. Type and college cannot change.

        Raises:
            NotFoundError: If the event or the new location does not exist.
            ForbiddenError: If the actor may not mutate the event.
        """
        event = self.get_event_model(event_id)
        variant = self.get_variant(event)
        if not can_mutate(actor, event, variant, self.get_rso_admin_id(variant)):
            raise ForbiddenError("You do not have permission to update this event")

        changes = request.model_dump(exclude_none=True)
        if "location_id" in changes:
            self._require(LocationModel.location_id, changes["location_id"], "Location")
        for field, value in changes.items():
            setattr(event, field, value)
        self.db.commit()
        self.db.refresh(event)
        logger.info("User %s updated event %s: %s", actor.user_id, event_id, sorted(changes))
        return self.materialize(event, variant)

    def materialize(
        self, event: EventModel, variant: Optional[EventVariant] = None
    ) -> EventDetails:
        """Build the display model of an event. No visibility check."""
        if variant is None:
            variant = self.get_variant(event)
        rating = RatingManager(self.db).get_event_rating(event.event_id)
        return EventDetails(
            event_id=event.event_id,
            name=event.name,
            description=event.description,
            date=event.date,
            time=event.time,
            location_id=event.location_id,
            college_id=event.college_id,
            created_by=event.created_by,
            event_type=EventType(event.event_type),
            contact_phone=event.contact_phone,
            contact_email=event.contact_email,
            rso_id=variant.rso_id if isinstance(variant, RsoEventModel) else None,
            approved=(
                bool(variant.approved) if isinstance(variant, PublicEventModel) else None
            ),
            average_rating=rating.average_rating,
            total_ratings=rating.total_ratings,
            comment_count=CommentManager(self.db).count_comments(event.event_id),
        )

    def _require(self, column, value, entity: str) -> None:
        if self.db.query(column).filter(column == value).first() is None:
            raise NotFoundError(entity, value)
