"""Comment management utilities."""

import logging
from datetime import datetime
from typing import List, Optional

import pytz
from sqlalchemy import func
from sqlalchemy.orm import Session

from core.exceptions import ForbiddenError, NotFoundError, ValidationError
from models.comment import CommentModel
from models.event import EventModel
from schemas.event import CommentInfo
from schemas.identity import Identity
from utils.event_variants import get_variant
from utils.rso_manager import RsoManager
from utils.visibility import can_view

logger = logging.getLogger(__name__)


def _to_utc(timestamp: datetime) -> datetime:
    # Offsets are not stored; naive input is taken as UTC
    if timestamp.tzinfo is None:
        return pytz.utc.localize(timestamp)
    return timestamp.astimezone(pytz.utc)


def _to_info(model: CommentModel) -> CommentInfo:
    return CommentInfo(
        comment_id=model.comment_id,
        event_id=model.event_id,
        user_id=model.user_id,
        content=model.content,
        timestamp=model.timestamp,
    )


class CommentManager:
    def __init__(self, db: Session):
        self.db = db

    def add_comment(
        self,
        event_id: int,
        actor: Identity,
        content: str,
        timestamp: Optional[datetime] = None,
    ) -> CommentInfo:
        """Add a comment to an event the actor can see.

        Args:
            event_id: Event to comment on.
            actor: Commenting user.
            content: Comment text.
            timestamp: Creation time; defaults to now. Stored in UTC, naive
                values are taken as UTC.

        Raises:
            NotFoundError: If the event does not exist.
            ForbiddenError: If the actor cannot see the event.
            ValidationError: If the content is blank.
        """
        if not content or not content.strip():
            raise ValidationError("Comment cannot be empty")
        event = self.db.query(EventModel).filter(EventModel.event_id == event_id).first()
        if not event:
            raise NotFoundError("Event", event_id)
        if not can_view(actor, event, get_variant(self.db, event), RsoManager(self.db)):
            raise ForbiddenError("You do not have permission to view this event")

        model = CommentModel(
            event_id=event_id,
            user_id=actor.user_id,
            content=content.strip(),
            timestamp=_to_utc(timestamp or datetime.now(pytz.utc)),
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("User %s commented on event %s", actor.user_id, event_id)
        return _to_info(model)

    def list_comments(self, event_id: int) -> List[CommentInfo]:
        """List an event's comments, newest first."""
        models = (
            self.db.query(CommentModel)
            .filter(CommentModel.event_id == event_id)
            .order_by(CommentModel.timestamp.desc(), CommentModel.comment_id.desc())
            .all()
        )
        return [_to_info(m) for m in models]

    def count_comments(self, event_id: int) -> int:
        return (
            self.db.query(func.count(CommentModel.comment_id))
            .filter(CommentModel.event_id == event_id)
            .scalar()
        )

    def update_comment(self, comment_id: int, actor: Identity, content: str) -> CommentInfo:
        if not content or not content.strip():
            raise ValidationError("Comment cannot be empty")
        model = self._get_owned(comment_id, actor, "update")
        model.content = content.strip()
        self.db.commit()
        self.db.refresh(model)
        return _to_info(model)

    def delete_comment(self, comment_id: int, actor: Identity) -> None:
        model = self._get_owned(comment_id, actor, "delete")
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted comment %s", comment_id)

    def _get_owned(self, comment_id: int, actor: Identity, action: str) -> CommentModel:
        model = (
            self.db.query(CommentModel)
            .filter(CommentModel.comment_id == comment_id)
            .first()
        )
        if not model:
            raise NotFoundError("Comment", comment_id)
        if model.user_id != actor.user_id and not actor.is_super_admin:
            raise ForbiddenError(f"You do not have permission to {action} this comment")
        return model
