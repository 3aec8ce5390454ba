"""User management utilities.

This module provides user storage, college affiliation, and the lookup that
turns a stored user into the ``Identity`` every core operation receives.
"""

import logging
from datetime import datetime
from typing import List, Optional

import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, NotFoundError
from models.college import CollegeModel
from models.user import UserModel
from schemas.identity import Identity, Role

logger = logging.getLogger(__name__)


class UserManager:
    """Manages user persistence and college affiliation using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def create_user(
        self,
        username: str,
        email: str,
        role: Role = Role.STUDENT,
        college_id: Optional[int] = None,
        display_name: Optional[str] = None,
    ) -> UserModel:
        """Create a new user.

        Args:
            username: Unique username.
            email: Unique email address.
            role: Global role.
            college_id: Optional college affiliation.
            display_name: Optional display name.

        Returns:
            The created UserModel.

        Raises:
            ConflictError: If the username or email is taken.
            NotFoundError: If college_id does not exist.
        """
        existing = (
            self.db.query(UserModel)
            .filter((UserModel.username == username) | (UserModel.email == email))
            .first()
        )
        if existing:
            raise ConflictError(f"User '{username}' already exists")
        if college_id is not None:
            self._require_college(college_id)

        model = UserModel(
            username=username,
            email=email,
            role=Role(role).value,
            display_name=display_name,
            college_id=college_id,
            create_at=datetime.now(pytz.utc).isoformat(),
        )
        # Two concurrent requests can both pass the check above;
        # the unique constraints catch the loser
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"User '{username}' already exists") from e

        logger.info("Created user: %s", username)
        return model

    def get_user(self, user_id: int) -> UserModel:
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if not model:
            raise NotFoundError("User", user_id)
        return model

    def get_user_by_username(self, username: str) -> Optional[UserModel]:
        return self.db.query(UserModel).filter(UserModel.username == username).first()

    def get_identity(self, user_id: int) -> Identity:
        """Build the identity of a stored user.

        Raises:
            NotFoundError: If the user does not exist.
        """
        model = self.get_user(user_id)
        return Identity(
            user_id=model.user_id,
            role=Role(model.role),
            college_id=model.college_id,
        )

    def list_users_for_college(self, college_id: int) -> List[UserModel]:
        return (
            self.db.query(UserModel)
            .filter(UserModel.college_id == college_id)
            .order_by(UserModel.user_id)
            .all()
        )

    def set_college(self, user_id: int, college_id: Optional[int]) -> UserModel:
        """Change a user's college affiliation.

        Args:
            user_id: User to update.
            college_id: New college, or None to detach.

        Raises:
            NotFoundError: If the user or the college does not exist.
        """
        model = self.get_user(user_id)
        if college_id is not None:
            self._require_college(college_id)
        model.college_id = college_id
        self.db.commit()
        self.db.refresh(model)
        logger.info("User %s affiliated with college %s", user_id, college_id)
        return model

    def _require_college(self, college_id: int) -> None:
        exists = (
            self.db.query(CollegeModel.college_id)
            .filter(CollegeModel.college_id == college_id)
            .first()
        )
        if not exists:
            raise NotFoundError("College", college_id)
