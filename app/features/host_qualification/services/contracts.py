"""
Collaborator contracts for the host qualification pipeline.

The pipeline only orchestrates these capabilities; how hosts are loaded,
how continuity, segments or fairness are decided is up to the
implementation plugged in.
"""

from typing import Any, Protocol

from app.features.host_qualification.domain.models import (
    BookingRecord,
    EventType,
    Host,
    NormalizedHosts,
)


class HostQualificationError(Exception):
    """Base exception for collaborator failures during host qualification."""

    def __init__(
        self,
        message: str,
        event_type_id: int | None = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.event_type_id = event_type_id
        self.recoverable = recoverable


class HostSourceError(HostQualificationError):
    """Raised when hosts or their credentials cannot be loaded."""


class HostSource(Protocol):
    async def normalize(self, event_type: EventType) -> NormalizedHosts: ...


class ContinuityFilter(Protocol):
    async def filter(
        self,
        *,
        hosts: list[Host],
        reschedule_uid: str | None,
        reschedule_with_same_round_robin_host: bool,
        routed_team_member_ids: list[int],
    ) -> list[Host]: ...


class SegmentMatcher(Protocol):
    async def filter(self, *, event_type: EventType, hosts: list[Host]) -> list[Host]: ...


class FairnessFilter(Protocol):
    async def filter(
        self,
        *,
        event_type: EventType,
        hosts: list[Host],
        max_lead_threshold: int | None,
        routing_form_response: Any | None,
    ) -> list[Host]: ...


class BookingRepository(Protocol):
    async def find_by_uid(self, uid: str) -> BookingRecord | None: ...

    async def list_for_event_type(self, event_type_id: int) -> list[BookingRecord]: ...
