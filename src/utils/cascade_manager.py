"""Cascading deletion of colleges, RSOs and events.

Every deletion walks the dependency tree by ID, one level at a time, and
removes children before the rows they reference. Each public operation runs
inside a single unit of work: a failing step rolls back the whole cascade and
surfaces as ``CascadeIntegrityError``.
"""

import logging
from typing import Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.database import unit_of_work
from core.exceptions import CascadeIntegrityError, NotFoundError
from models.college import CollegeModel
from models.comment import CommentModel
from models.event import EventModel, EventType, RsoEventModel
from models.rating import RatingModel
from models.rso import RsoModel
from models.rso_membership import RsoMembershipModel
from models.user import UserModel
from schemas.identity import Identity
from utils.event_variants import delete_variant, get_variant
from utils.visibility import (
    ensure_can_delete_college,
    ensure_can_delete_event,
    ensure_can_delete_rso,
)

logger = logging.getLogger(__name__)


class MissingRowError(Exception):
    """A row the cascade expected to delete was not there."""

    pass


def _new_report() -> Dict[str, int]:
    return {
        "rsos": 0,
        "memberships": 0,
        "events": 0,
        "variants": 0,
        "comments": 0,
        "ratings": 0,
        "users_detached": 0,
    }


class CascadeCoordinator:
    """Deletes an entity together with everything that depends on it."""

    def __init__(self, db: Session):
        self.db = db

    # --- Public operations ---

    def delete_college(self, college_id: int, actor: Identity) -> Dict[str, int]:
        """Delete a college and everything it owns. Super admins only.

        Order:
          1. each RSO of the college, with its hosted events and memberships
          2. remaining PUBLIC and PRIVATE events of the college
          3. detach affiliated users (college_id set to NULL)
          4. the college row

        Returns:
            Counts of removed or detached rows, keyed by kind.

        Raises:
            ForbiddenError: If the actor is not a super admin.
            NotFoundError: If the college does not exist.
            CascadeIntegrityError: If any step failed; nothing was deleted.
        """
        ensure_can_delete_college(actor)
        college = (
            self.db.query(CollegeModel)
            .filter(CollegeModel.college_id == college_id)
            .first()
        )
        if not college:
            raise NotFoundError("College", college_id)

        report = self._run("delete_college", college_id, self._purge_college)
        logger.info(
            "User %s deleted college %s: %s", actor.user_id, college_id, report
        )
        return report

    def delete_rso(self, rso_id: int, actor: Identity) -> Dict[str, int]:
        """Delete an RSO with its hosted events and memberships.

        Raises:
            NotFoundError: If the RSO does not exist.
            ForbiddenError: If the actor is neither the RSO admin nor a super admin.
            CascadeIntegrityError: If any step failed; nothing was deleted.
        """
        rso = self.db.query(RsoModel).filter(RsoModel.rso_id == rso_id).first()
        if not rso:
            raise NotFoundError("RSO", rso_id)
        ensure_can_delete_rso(actor, rso)

        report = self._run("delete_rso", rso_id, self._purge_rso)
        logger.info("User %s deleted RSO %s: %s", actor.user_id, rso_id, report)
        return report

    def delete_event(self, event_id: int, actor: Identity) -> Dict[str, int]:
        """Delete an event, its variant, comments and ratings.

        Raises:
            NotFoundError: If the event does not exist.
            ForbiddenError: If the actor may not mutate the event.
            CascadeIntegrityError: If any step failed; nothing was deleted.
        """
        event = self.db.query(EventModel).filter(EventModel.event_id == event_id).first()
        if not event:
            raise NotFoundError("Event", event_id)
        variant = get_variant(self.db, event)
        rso_admin_id = None
        if isinstance(variant, RsoEventModel):
            rso_admin_id = (
                self.db.query(RsoModel.admin_id)
                .filter(RsoModel.rso_id == variant.rso_id)
                .scalar()
            )
        ensure_can_delete_event(actor, event, variant, rso_admin_id)

        report = self.remove_event(event_id)
        logger.info("User %s deleted event %s", actor.user_id, event_id)
        return report

    def remove_event(self, event_id: int) -> Dict[str, int]:
        """Delete an event and its dependents without an authorization check.

        Callers must authorize first. Used by ``delete_event`` and by the
        approval workflow when a public event is rejected.
        """
        return self._run("delete_event", event_id, self._purge_single_event)

    # --- Internals ---

    def _run(self, operation: str, entity_id: int, purge) -> Dict[str, int]:
        report = _new_report()
        try:
            with unit_of_work(self.db):
                purge(entity_id, report)
        except (SQLAlchemyError, MissingRowError) as e:
            logger.error(
                "%s(%s) rolled back; possible invariant violation "
                "(dependent without parent or parent without expected dependent): %s",
                operation,
                entity_id,
                e,
                exc_info=True,
            )
            raise CascadeIntegrityError(operation, entity_id, str(e)) from e
        return report

    def _purge_college(self, college_id: int, report: Dict[str, int]) -> None:
        rso_ids = self._ids(RsoModel.rso_id, RsoModel.college_id == college_id)
        for rso_id in rso_ids:
            self._purge_rso(rso_id, report)

        # RSO-typed events went with their RSOs above
        event_rows = (
            self.db.query(EventModel.event_id, EventModel.event_type)
            .filter(
                EventModel.college_id == college_id,
                EventModel.event_type.in_(
                    [EventType.PUBLIC.value, EventType.PRIVATE.value]
                ),
            )
            .order_by(EventModel.event_id)
            .all()
        )
        for event_id, event_type in event_rows:
            self._delete_comments_and_ratings(event_id, report)
            self._delete_variant_row(event_id, event_type, report)
            self._delete_base_event(event_id, report)

        report["users_detached"] += (
            self.db.query(UserModel)
            .filter(UserModel.college_id == college_id)
            .update({UserModel.college_id: None})
        )

        self._expect_one(
            self.db.query(CollegeModel)
            .filter(CollegeModel.college_id == college_id)
            .delete(),
            "College",
            college_id,
        )

    def _purge_rso(self, rso_id: int, report: Dict[str, int]) -> None:
        event_ids = self._ids(RsoEventModel.event_id, RsoEventModel.rso_id == rso_id)
        for event_id in event_ids:
            self._delete_comments_and_ratings(event_id, report)
            self._delete_variant_row(event_id, EventType.RSO.value, report)
            self._delete_base_event(event_id, report)

        report["memberships"] += (
            self.db.query(RsoMembershipModel)
            .filter(RsoMembershipModel.rso_id == rso_id)
            .delete()
        )
        self._expect_one(
            self.db.query(RsoModel).filter(RsoModel.rso_id == rso_id).delete(),
            "RSO",
            rso_id,
        )
        report["rsos"] += 1

    def _purge_single_event(self, event_id: int, report: Dict[str, int]) -> None:
        event = self.db.query(EventModel).filter(EventModel.event_id == event_id).first()
        if not event:
            raise MissingRowError(f"Event '{event_id}' vanished before deletion")
        # Variant first, then comments and ratings, then the base row
        self._delete_variant_row(event_id, event.event_type, report)
        self._delete_comments_and_ratings(event_id, report)
        self._delete_base_event(event_id, report)

    def _delete_comments_and_ratings(self, event_id: int, report: Dict[str, int]) -> None:
        report["comments"] += (
            self.db.query(CommentModel).filter(CommentModel.event_id == event_id).delete()
        )
        report["ratings"] += (
            self.db.query(RatingModel).filter(RatingModel.event_id == event_id).delete()
        )

    def _delete_variant_row(
        self, event_id: int, event_type: str, report: Dict[str, int]
    ) -> None:
        self._expect_one(
            delete_variant(self.db, event_id, event_type),
            f"{event_type} variant of event",
            event_id,
        )
        report["variants"] += 1

    def _delete_base_event(self, event_id: int, report: Dict[str, int]) -> None:
        self._expect_one(
            self.db.query(EventModel).filter(EventModel.event_id == event_id).delete(),
            "Event",
            event_id,
        )
        report["events"] += 1

    def _ids(self, column, criterion) -> List[int]:
        rows = self.db.query(column).filter(criterion).order_by(column).all()
        return [value for (value,) in rows]

    @staticmethod
    def _expect_one(deleted: int, entity: str, entity_id: int) -> None:
        if deleted != 1:
            raise MissingRowError(
                f"Expected to delete {entity} '{entity_id}', deleted {deleted}"
            )
