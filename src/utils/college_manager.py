"""College management utilities."""

import logging
from datetime import datetime
from typing import List, Optional

import pytz
from sqlalchemy.orm import Session

from core.exceptions import ForbiddenError, NotFoundError, ValidationError
from models.college import CollegeModel
from schemas.identity import Identity

logger = logging.getLogger(__name__)


class CollegeManager:
    """Creates, reads and updates colleges. Deletion lives in CascadeCoordinator."""

    def __init__(self, db: Session):
        self.db = db

    def create_college(
        self,
        name: str,
        location: str,
        actor: Identity,
        description: Optional[str] = None,
    ) -> CollegeModel:
        """Create a college. Super admins only.

        Raises:
            ForbiddenError: If the actor is not a super admin.
            ValidationError: If the name is blank.
        """
        if not actor.is_super_admin:
            raise ForbiddenError("Only super admins can create colleges")
        name = name.strip()
        if not name:
            raise ValidationError("College name cannot be empty")

        model = CollegeModel(
            name=name,
            location=location,
            description=description,
            created_by=actor.user_id,
            created_at=datetime.now(pytz.utc).isoformat(),
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created college %s: %s", model.college_id, name)
        return model

    def get_college(self, college_id: int) -> CollegeModel:
        model = (
            self.db.query(CollegeModel)
            .filter(CollegeModel.college_id == college_id)
            .first()
        )
        if not model:
            raise NotFoundError("College", college_id)
        return model

    def list_colleges(self) -> List[CollegeModel]:
        return self.db.query(CollegeModel).order_by(CollegeModel.name).all()

    def update_college(
        self,
        college_id: int,
        actor: Identity,
        name: Optional[str] = None,
        location: Optional[str] = None,
        description: Optional[str] = None,
    ) -> CollegeModel:
        if not actor.is_super_admin:
            raise ForbiddenError("Only super admins can update colleges")
        model = self.get_college(college_id)
        if name is not None:
            if not name.strip():
                raise ValidationError("College name cannot be empty")
            model.name = name.strip()
        if location is not None:
            model.location = location
        if description is not None:
            model.description = description
        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated college %s", college_id)
        return model
