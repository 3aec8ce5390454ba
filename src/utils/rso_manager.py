"""RSO and membership management utilities."""

import logging
from datetime import datetime
from typing import List, Optional

import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import (
    AlreadyMemberError,
    ForbiddenError,
    NotAMemberError,
    NotFoundError,
    ValidationError,
)
from models.college import CollegeModel
from models.rso import RsoModel, RsoStatus
from models.rso_membership import RsoMembershipModel
from models.user import UserModel
from schemas.identity import Identity

logger = logging.getLogger(__name__)


class RsoManager:
    """Manages RSOs and the user-to-RSO membership registry."""

    def __init__(self, db: Session):
        self.db = db

    def create_rso(
        self,
        name: str,
        college_id: int,
        actor: Identity,
        description: Optional[str] = None,
    ) -> RsoModel:
        """Create a new RSO and add its admin as a member.

        The actor becomes the RSO admin. Both rows are committed together.

        Raises:
            ForbiddenError: If the actor is not an admin.
            NotFoundError: If the college does not exist.
            ValidationError: If the name is blank.
        """
        if not actor.is_admin:
            raise ForbiddenError("Only administrators can create RSOs")
        name = name.strip()
        if not name:
            raise ValidationError("RSO name cannot be empty")
        college = (
            self.db.query(CollegeModel)
            .filter(CollegeModel.college_id == college_id)
            .first()
        )
        if not college:
            raise NotFoundError("College", college_id)

        now = datetime.now(pytz.utc).isoformat()
        rso = RsoModel(
            name=name,
            description=description,
            college_id=college_id,
            admin_id=actor.user_id,
            status=RsoStatus.ACTIVE.value,
            created_at=now,
        )
        self.db.add(rso)
        self.db.flush()

        self.db.add(
            RsoMembershipModel(user_id=actor.user_id, rso_id=rso.rso_id, joined_at=now)
        )
        self.db.commit()
        self.db.refresh(rso)
        logger.info("Created RSO %s (%s) with admin %s", rso.rso_id, name, actor.user_id)
        return rso

    def get_rso(self, rso_id: int) -> RsoModel:
        model = self.db.query(RsoModel).filter(RsoModel.rso_id == rso_id).first()
        if not model:
            raise NotFoundError("RSO", rso_id)
        return model

    def list_rsos(self, college_id: Optional[int] = None) -> List[RsoModel]:
        query = self.db.query(RsoModel)
        if college_id is not None:
            query = query.filter(RsoModel.college_id == college_id)
        return query.order_by(RsoModel.rso_id).all()

    def list_rsos_for_admin(self, admin_id: int) -> List[RsoModel]:
        return (
            self.db.query(RsoModel)
            .filter(RsoModel.admin_id == admin_id)
            .order_by(RsoModel.rso_id)
            .all()
        )

    def update_rso(
        self,
        rso_id: int,
        actor: Identity,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> RsoModel:
        rso = self.get_rso(rso_id)
        if rso.admin_id != actor.user_id and not actor.is_super_admin:
            raise ForbiddenError("Only the RSO admin can update this RSO")
        if name is not None:
            if not name.strip():
                raise ValidationError("RSO name cannot be empty")
            rso.name = name.strip()
        if description is not None:
            rso.description = description
        self.db.commit()
        self.db.refresh(rso)
        logger.info("Updated RSO %s", rso_id)
        return rso

    # --- Membership registry ---

    def exists_by_user_and_rso(self, user_id: int, rso_id: int) -> bool:
        return (
            self.db.query(RsoMembershipModel.id)
            .filter(
                RsoMembershipModel.user_id == user_id,
                RsoMembershipModel.rso_id == rso_id,
            )
            .first()
            is not None
        )

    def join_rso(self, user_id: int, rso_id: int) -> RsoMembershipModel:
        """Add a user to an RSO.

        The existence check gives a clean error in the common case; the
        unique (user_id, rso_id) constraint settles concurrent joins.

        Raises:
            NotFoundError: If the RSO or the user does not exist.
            AlreadyMemberError: If the user is already a member.
        """
        self.get_rso(rso_id)
        if not self.db.query(UserModel.user_id).filter(UserModel.user_id == user_id).first():
            raise NotFoundError("User", user_id)
        if self.exists_by_user_and_rso(user_id, rso_id):
            raise AlreadyMemberError(user_id, rso_id)

        membership = RsoMembershipModel(
            user_id=user_id,
            rso_id=rso_id,
            joined_at=datetime.now(pytz.utc).isoformat(),
        )
        try:
            self.db.add(membership)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise AlreadyMemberError(user_id, rso_id) from e
        self.db.refresh(membership)
        logger.info("User %s joined RSO %s", user_id, rso_id)
        return membership

    def leave_rso(self, user_id: int, rso_id: int) -> None:
        """Remove a user's membership.

        Raises:
            NotFoundError: If the RSO does not exist.
            NotAMemberError: If the user is not a member.
            ForbiddenError: If the user is the RSO admin.
        """
        rso = self.get_rso(rso_id)

        membership = (
            self.db.query(RsoMembershipModel)
            .filter(
                RsoMembershipModel.user_id == user_id,
                RsoMembershipModel.rso_id == rso_id,
            )
            .first()
        )
        if not membership:
            raise NotAMemberError(user_id, rso_id)

        # The admin must transfer or delete the RSO instead
        if rso.admin_id == user_id:
            raise ForbiddenError("RSO admin cannot leave their own RSO")

        self.db.delete(membership)
        self.db.commit()
        logger.info("User %s left RSO %s", user_id, rso_id)

    def list_members(self, rso_id: int) -> List[dict]:
        self.get_rso(rso_id)
        query = (
            self.db.query(RsoMembershipModel, UserModel)
            .join(UserModel, UserModel.user_id == RsoMembershipModel.user_id)
            .filter(RsoMembershipModel.rso_id == rso_id)
            .order_by(RsoMembershipModel.id)
        )
        results = []
        for membership, user in query.all():
            results.append(
                {
                    "user_id": user.user_id,
                    "username": user.username,
                    "display_name": user.display_name,
                    "joined_at": membership.joined_at,
                }
            )
        return results

    def list_rso_ids_for_user(self, user_id: int) -> List[int]:
        rows = (
            self.db.query(RsoMembershipModel.rso_id)
            .filter(RsoMembershipModel.user_id == user_id)
            .all()
        )
        return [rso_id for (rso_id,) in rows]
