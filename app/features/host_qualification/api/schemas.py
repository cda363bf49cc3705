"""
Host qualification API request/response models.
Used by the router for input validation and serialization.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.features.host_qualification.domain.models import (
    BookingRecord,
    BookingStatus,
    EventType,
    Host,
    QualificationResult,
    SchedulingType,
    User,
)


class UserPayload(BaseModel):
    id: int = Field(..., description="Stable user id")
    email: str = Field(..., min_length=1, description="User email")
    name: str | None = None

    def to_domain(self) -> User:
        return User(id=self.id, email=self.email, name=self.name)


class HostPayload(BaseModel):
    user: UserPayload
    is_fixed: bool | None = Field(default=None, description="Host always attends")
    created_at: datetime | None = None
    priority: int | None = None
    weight: int | None = Field(default=None, ge=0)
    group_id: str | None = None

    def to_domain(self) -> Host:
        return Host(
            user=self.user.to_domain(),
            is_fixed=self.is_fixed is True,
            created_at=self.created_at,
            priority=self.priority,
            weight=self.weight,
            group_id=self.group_id,
        )


class EventTypePayload(BaseModel):
    id: int
    scheduling_type: SchedulingType | None = None
    team_id: int | None = None
    hosts: list[HostPayload] | None = None
    users: list[UserPayload] = Field(default_factory=list)
    is_rr_weights_enabled: bool = False
    reschedule_with_same_round_robin_host: bool = False
    max_lead_threshold: int | None = Field(default=None, ge=0)
    include_no_show_in_rr_calculation: bool = False
    assign_rr_members_using_segment: bool = False
    segment_member_ids: list[int] | None = None

    def to_domain(self) -> EventType:
        return EventType(
            id=self.id,
            scheduling_type=self.scheduling_type,
            team_id=self.team_id,
            hosts=[h.to_domain() for h in self.hosts] if self.hosts is not None else None,
            users=[u.to_domain() for u in self.users],
            is_rr_weights_enabled=self.is_rr_weights_enabled,
            reschedule_with_same_round_robin_host=self.reschedule_with_same_round_robin_host,
            max_lead_threshold=self.max_lead_threshold,
            include_no_show_in_rr_calculation=self.include_no_show_in_rr_calculation,
            assign_rr_members_using_segment=self.assign_rr_members_using_segment,
            segment_member_ids=self.segment_member_ids,
        )


class BookingPayload(BaseModel):
    uid: str = Field(..., min_length=1)
    user_id: int | None = None
    event_type_id: int | None = None
    created_at: datetime | None = None
    status: BookingStatus = BookingStatus.ACCEPTED
    no_show_host: bool = False

    def to_domain(self) -> BookingRecord:
        return BookingRecord(
            uid=self.uid,
            user_id=self.user_id,
            event_type_id=self.event_type_id,
            created_at=self.created_at,
            status=self.status,
            no_show_host=self.no_show_host,
        )


class QualifyHostsRequest(BaseModel):
    """Request for qualifying the hosts of an event type."""

    event_type: EventTypePayload
    reschedule_uid: str | None = Field(default=None, description="Booking being rescheduled")
    routed_team_member_ids: list[int] = Field(
        default_factory=list, description="Team members pre-selected by routing"
    )
    contact_owner_email: str | None = Field(default=None, description="CRM contact owner")
    routing_form_response: dict[str, Any] | None = None
    bookings: list[BookingPayload] = Field(
        default_factory=list, description="Booking history snapshot for continuity and fairness"
    )


class HostResponse(BaseModel):
    user_id: int
    email: str
    is_fixed: bool
    created_at: datetime | None
    priority: int | None
    weight: int | None
    group_id: str | None


class QualifyHostsResponse(BaseModel):
    """Qualified hosts for an event type."""

    qualified_rr_hosts: list[HostResponse]
    fixed_hosts: list[HostResponse]
    all_fallback_rr_hosts: list[HostResponse] | None = Field(
        default=None, description="Wider pool kept for fallback, present only after narrowing"
    )

    @classmethod
    def from_domain(cls, result: QualificationResult) -> "QualifyHostsResponse":
        # fields left unset are dropped from the response
        return cls.model_validate(result.to_dict())
