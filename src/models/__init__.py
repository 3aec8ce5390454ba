from .base import Base
from .user import UserModel
from .college import CollegeModel
from .location import LocationModel
from .rso import RsoModel, RsoStatus
from .rso_membership import RsoMembershipModel
from .event import (
    EventModel,
    EventType,
    PrivateEventModel,
    PublicEventModel,
    RsoEventModel,
    VARIANT_MODELS,
)
from .comment import CommentModel
from .rating import RatingModel

__all__ = [
    "Base",
    "UserModel",
    "CollegeModel",
    "LocationModel",
    "RsoModel",
    "RsoStatus",
    "RsoMembershipModel",
    "EventModel",
    "EventType",
    "PublicEventModel",
    "PrivateEventModel",
    "RsoEventModel",
    "VARIANT_MODELS",
    "CommentModel",
    "RatingModel",
]
