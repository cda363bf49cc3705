"""
Same round-robin host continuity rule.

When a booking is rescheduled on an event type configured to keep the same
round-robin host, only the original organizer stays eligible.
"""

from app.features.host_qualification.domain.models import Host
from app.features.host_qualification.services.contracts import BookingRepository
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class SameRoundRobinHostFilter:
    """Default ContinuityFilter backed by a booking repository."""

    def __init__(self, booking_repository: BookingRepository):
        self._booking_repository = booking_repository

    async def filter(
        self,
        *,
        hosts: list[Host],
        reschedule_uid: str | None,
        reschedule_with_same_round_robin_host: bool,
        routed_team_member_ids: list[int],
    ) -> list[Host]:
        # Rerouting never forces the same host
        if (
            not reschedule_uid
            or not reschedule_with_same_round_robin_host
            or routed_team_member_ids
        ):
            return hosts

        original_booking = await self._booking_repository.find_by_uid(reschedule_uid)
        if original_booking is None or original_booking.user_id is None:
            logger.info(
                "Original booking unavailable, skipping same host filter",
                reschedule_uid=reschedule_uid,
            )
            return hosts

        matched = [h for h in hosts if h.user.id == original_booking.user_id]
        logger.debug(
            "Same round-robin host filter applied",
            reschedule_uid=reschedule_uid,
            organizer_id=original_booking.user_id,
            matched=len(matched),
        )
        return matched
