"""
Booking status transition policy.

Every permitted (actor_role, current_status, requested_status) triple is listed
in TRANSITION_PERMISSIONS; anything absent is forbidden. Staff may move a
booking between any two statuses. Customers may only cancel, and only while the
job has not been completed.
"""

import logging

from ...exceptions import ForbiddenError, InvalidRequestError
from ...models import BOOKING_STATUSES, ROLE_ADMIN, ROLE_CLIENT

logger = logging.getLogger(__name__)

STAFF_TRANSITIONS = frozenset(
    (ROLE_ADMIN, current, requested)
    for current in BOOKING_STATUSES
    for requested in BOOKING_STATUSES
)

CUSTOMER_TRANSITIONS = frozenset(
    {
        (ROLE_CLIENT, "pending", "cancelled"),
        (ROLE_CLIENT, "confirmed", "cancelled"),
        (ROLE_CLIENT, "in_progress", "cancelled"),
        (ROLE_CLIENT, "cancelled", "cancelled"),
    }
)

TRANSITION_PERMISSIONS = STAFF_TRANSITIONS | CUSTOMER_TRANSITIONS


def actor_role(role: str) -> str:
    """Any non-staff caller acts with customer permissions"""
    return ROLE_ADMIN if role == ROLE_ADMIN else ROLE_CLIENT


def is_transition_allowed(role: str, current: str, requested: str) -> bool:
    return (actor_role(role), current, requested) in TRANSITION_PERMISSIONS


def authorize_transition(role: str, current: str, requested: str) -> None:
    """
    Raises:
        InvalidRequestError: requested status is not a booking status
        ForbiddenError: the actor may not make this transition
    """
    if requested not in BOOKING_STATUSES:
        raise InvalidRequestError(
            f"Invalid status '{requested}'. Must be one of: {', '.join(BOOKING_STATUSES)}"
        )

    if is_transition_allowed(role, current, requested):
        return

    logger.warning(f"⚠️ Transition {current} -> {requested} refused for role '{role}'")
    if requested != "cancelled":
        raise ForbiddenError("Customers can only cancel their bookings")
    raise ForbiddenError(f"A {current} booking cannot be cancelled")
