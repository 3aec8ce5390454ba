"""Approval workflow for public events.

PENDING -> APPROVED, or PENDING -> rejected, which deletes the event.
APPROVED is final: an approved event cannot be rejected.
Approving an approved event re-stamps the approver and is not an error.
"""

import logging
from enum import Enum
from typing import List

from sqlalchemy.orm import Session

from core.exceptions import ConflictError, ForbiddenError, NotFoundError
from models.event import EventModel, PublicEventModel
from schemas.event import EventDetails
from schemas.identity import Identity
from utils.cascade_manager import CascadeCoordinator
from utils.event_manager import EventManager

logger = logging.getLogger(__name__)


class ApprovalState(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"


def approval_state(variant: PublicEventModel) -> ApprovalState:
    return ApprovalState.APPROVED if variant.approved else ApprovalState.PENDING


class ApprovalManager:
    """Reviews public events. Admins and super admins only."""

    def __init__(self, db: Session):
        self.db = db
        self.events = EventManager(db)

    def list_pending(self, actor: Identity) -> List[EventDetails]:
        """List public events waiting for approval, oldest first."""
        self._ensure_reviewer(actor, "view pending public events")
        rows = (
            self.db.query(EventModel, PublicEventModel)
            .join(PublicEventModel, PublicEventModel.event_id == EventModel.event_id)
            .filter(PublicEventModel.approved.is_(False))
            .order_by(EventModel.event_id)
            .all()
        )
        return [self.events.materialize(event, variant) for event, variant in rows]

    def approve_event(self, event_id: int, actor: Identity) -> EventDetails:
        """Mark a public event approved by ``actor``.

        Raises:
            ForbiddenError: If the actor is not an admin.
            NotFoundError: If there is no public event with this ID.
        """
        self._ensure_reviewer(actor, "approve public events")
        variant = self._get_public_variant(event_id)

        variant.approved = True
        variant.approver_id = actor.user_id
        self.db.commit()
        logger.info("User %s approved public event %s", actor.user_id, event_id)
        return self.events.materialize(self.events.get_event_model(event_id), variant)

    def reject_event(self, event_id: int, actor: Identity) -> None:
        """Reject a pending public event, deleting it with its variant and dependents.

        Approved events are final; remove them with ``CascadeCoordinator.delete_event``.

        Raises:
            ForbiddenError: If the actor is not an admin.
            NotFoundError: If there is no public event with this ID.
            ConflictError: If the event is already approved.
            CascadeIntegrityError: If the deletion failed and was rolled back.
        """
        self._ensure_reviewer(actor, "reject public events")
        variant = self._get_public_variant(event_id)
        if approval_state(variant) == ApprovalState.APPROVED:
            raise ConflictError(f"Public event '{event_id}' is already approved")

        CascadeCoordinator(self.db).remove_event(event_id)
        logger.info("User %s rejected public event %s", actor.user_id, event_id)

    def _get_public_variant(self, event_id: int) -> PublicEventModel:
        self.events.get_event_model(event_id)
        variant = (
            self.db.query(PublicEventModel)
            .filter(PublicEventModel.event_id == event_id)
            .first()
        )
        if not variant:
            raise NotFoundError("Public event", event_id)
        return variant

    @staticmethod
    def _ensure_reviewer(actor: Identity, action: str) -> None:
        if not actor.is_admin:
            raise ForbiddenError(f"Only admins can {action}")
