"""Event visibility and mutation policy.

Pure decision functions: given an identity, an event, its variant row and a
membership lookup, decide whether the identity may see or change the event.
Nothing here touches the session directly.
"""

from typing import Optional, Protocol, Union

from core.exceptions import ForbiddenError
from models.event import (
    EventModel,
    EventType,
    PrivateEventModel,
    PublicEventModel,
    RsoEventModel,
)
from models.rso import RsoModel
from schemas.identity import Identity

EventVariant = Union[PublicEventModel, PrivateEventModel, RsoEventModel]


def _event_type(event: EventModel) -> Optional[EventType]:
    try:
        return EventType(event.event_type)
    except ValueError:
        return None


class MembershipLookup(Protocol):
    def exists_by_user_and_rso(self, user_id: int, rso_id: int) -> bool:
        ...


def can_view(
    identity: Identity,
    event: EventModel,
    variant: Optional[EventVariant],
    membership: MembershipLookup,
) -> bool:
    """Decide whether ``identity`` may see ``event``.

    Rules, first match wins:
      1. SUPER_ADMIN sees everything.
      2. PUBLIC: visible iff the variant is approved.
      3. PRIVATE: visible iff the identity's college equals the event's.
      4. RSO: visible iff the identity is a member of the hosting RSO.
      5. Anything else is denied.

    A missing or mismatched variant row denies instead of raising.
    """
    if identity.is_super_admin:
        return True

    event_type = _event_type(event)

    if event_type == EventType.PUBLIC:
        return isinstance(variant, PublicEventModel) and bool(variant.approved)

    if event_type == EventType.PRIVATE:
        # None never matches, even against a None on the event side
        return (
            identity.college_id is not None
            and event.college_id is not None
            and identity.college_id == event.college_id
        )

    if event_type == EventType.RSO:
        if not isinstance(variant, RsoEventModel):
            return False
        return membership.exists_by_user_and_rso(identity.user_id, variant.rso_id)

    return False


def can_mutate(
    identity: Identity,
    event: EventModel,
    variant: Optional[EventVariant],
    rso_admin_id: Optional[int] = None,
) -> bool:
    """Decide whether ``identity`` may update or delete ``event``.

    Allowed for the creator, for SUPER_ADMIN, and for the admin of the RSO
    hosting an RSO event. ``rso_admin_id`` is the hosting RSO's admin and is
    only consulted for RSO events.
    """
    if identity.user_id == event.created_by:
        return True
    if identity.is_super_admin:
        return True
    if (
        _event_type(event) == EventType.RSO
        and isinstance(variant, RsoEventModel)
        and rso_admin_id is not None
    ):
        return identity.user_id == rso_admin_id
    return False


# --- Deletion authorization, checked before the cascade runs ---


def ensure_can_delete_college(identity: Identity) -> None:
    if not identity.is_super_admin:
        raise ForbiddenError("Only super admins can delete colleges")


def ensure_can_delete_rso(identity: Identity, rso: RsoModel) -> None:
    if identity.is_super_admin or identity.user_id == rso.admin_id:
        return
    raise ForbiddenError("Only the RSO admin can delete this RSO")


def ensure_can_delete_event(
    identity: Identity,
    event: EventModel,
    variant: Optional[EventVariant],
    rso_admin_id: Optional[int] = None,
) -> None:
    if not can_mutate(identity, event, variant, rso_admin_id):
        raise ForbiddenError("You do not have permission to delete this event")
