"""Identity schema definitions.

The authenticated caller of every core operation, passed explicitly.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    STUDENT = "STUDENT"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class Identity(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: int = Field(description="The ID of the authenticated user.")
    role: Role = Field(description="The user's global role.")
    college_id: Optional[int] = Field(
        default=None,
        description="The college the user is affiliated with, if any.",
    )

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN

    @property
    def is_admin(self) -> bool:
        """True for ADMIN and SUPER_ADMIN."""
        return self.role in (Role.ADMIN, Role.SUPER_ADMIN)
