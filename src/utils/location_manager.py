"""Location management utilities."""

import logging

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, ValidationError
from models.location import LocationModel

logger = logging.getLogger(__name__)


class LocationManager:
    def __init__(self, db: Session):
        self.db = db

    def create_location(
        self, name: str, address: str, latitude: float, longitude: float
    ) -> LocationModel:
        if not -90.0 <= latitude <= 90.0 or not -180.0 <= longitude <= 180.0:
            raise ValidationError(f"Invalid coordinates: ({latitude}, {longitude})")
        model = LocationModel(
            name=name, address=address, latitude=latitude, longitude=longitude
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created location %s: %s", model.location_id, name)
        return model

    def get_location(self, location_id: int) -> LocationModel:
        model = (
            self.db.query(LocationModel)
            .filter(LocationModel.location_id == location_id)
            .first()
        )
        if not model:
            raise NotFoundError("Location", location_id)
        return model
