"""
Lead threshold fairness filter.

Hosts that are already ``max_lead_threshold`` or more weighted bookings
ahead of the least-loaded host are excluded from the rotation.
"""

from __future__ import annotations

from collections import Counter
from typing import Any

from app.config import settings
from app.features.host_qualification.domain.models import BookingStatus, EventType, Host
from app.features.host_qualification.services.contracts import BookingRepository
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class LeadThresholdFilter:
    """Default FairnessFilter backed by a booking repository."""

    def __init__(self, booking_repository: BookingRepository, default_weight: int | None = None):
        self._booking_repository = booking_repository
        self._default_weight = default_weight or settings.HOST_QUALIFICATION_DEFAULT_WEIGHT

    async def filter(
        self,
        *,
        event_type: EventType,
        hosts: list[Host],
        max_lead_threshold: int | None,
        routing_form_response: Any | None,
    ) -> list[Host]:
        if not max_lead_threshold or not event_type.is_rr_weights_enabled or not hosts:
            return hosts

        bookings = await self._booking_repository.list_for_event_type(event_type.id)
        counts = Counter(
            b.user_id
            for b in bookings
            if b.status == BookingStatus.ACCEPTED
            and (event_type.include_no_show_in_rr_calculation or not b.no_show_host)
        )

        loads = {h.user.id: self._weighted_load(counts[h.user.id], h.weight) for h in hosts}
        least_loaded = min(loads.values())
        eligible = [h for h in hosts if loads[h.user.id] - least_loaded < max_lead_threshold]

        logger.debug(
            "Lead threshold filter applied",
            event_type_id=event_type.id,
            max_lead_threshold=max_lead_threshold,
            has_routing_form_response=routing_form_response is not None,
            eligible=len(eligible),
            excluded=len(hosts) - len(eligible),
        )
        return eligible

    def _weighted_load(self, booking_count: int, weight: int | None) -> float:
        """Bookings scaled so a host with twice the weight carries half the load."""
        effective_weight = weight if weight and weight > 0 else self._default_weight
        return booking_count * self._default_weight / effective_weight
