"""
Booking lookups backing the continuity and fairness collaborators.

Works over a booking snapshot supplied by the caller so a qualification
run never reads shared state.
"""

from collections.abc import Iterable

from app.features.host_qualification.domain.models import BookingRecord
from app.features.host_qualification.services.contracts import HostQualificationError
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class BookingLookupError(HostQualificationError):
    """More specific exception for booking lookup failures."""


class SnapshotBookingRepository:
    """Read-only booking repository over an in-request snapshot."""

    def __init__(self, bookings: Iterable[BookingRecord] = ()):
        self._by_uid: dict[str, BookingRecord] = {}
        for booking in bookings:
            if not booking.uid:
                raise BookingLookupError("Booking snapshot entry is missing a uid")
            if booking.uid in self._by_uid:
                raise BookingLookupError(
                    f"Duplicate booking uid in snapshot: {booking.uid}",
                    event_type_id=booking.event_type_id,
                    recoverable=False,
                )
            self._by_uid[booking.uid] = booking

    async def find_by_uid(self, uid: str) -> BookingRecord | None:
        booking = self._by_uid.get(uid)
        if booking is None:
            logger.debug("Booking not found in snapshot", booking_uid=uid)
        return booking

    async def list_for_event_type(self, event_type_id: int) -> list[BookingRecord]:
        return [b for b in self._by_uid.values() if b.event_type_id == event_type_id]
