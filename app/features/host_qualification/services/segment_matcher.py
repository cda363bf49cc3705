"""
Event segment matching.

Upstream attribute routing resolves the event type's segment into a set of
team member ids; this matcher narrows the round-robin hosts to that set.
"""

from app.features.host_qualification.domain.models import EventType, Host
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class EventSegmentMatcher:
    """Default SegmentMatcher."""

    async def filter(self, *, event_type: EventType, hosts: list[Host]) -> list[Host]:
        if not event_type.assign_rr_members_using_segment or event_type.segment_member_ids is None:
            return hosts

        segment = set(event_type.segment_member_ids)
        matched = [h for h in hosts if h.user.id in segment]
        logger.debug(
            "Segment matching applied",
            event_type_id=event_type.id,
            segment_size=len(segment),
            matched=len(matched),
        )
        return matched
