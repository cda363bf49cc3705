"""
Domain models for the host qualification feature.

These lightweight dataclasses describe the snapshots the qualification
pipeline consumes and produces. They intentionally avoid business logic so
they can be reused by collaborators, services, and API layers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar


class HostUser(Protocol):
    """Minimum shape of a user payload attached to a host."""

    @property
    def id(self) -> int: ...

    @property
    def email(self) -> str: ...


UserT = TypeVar("UserT", bound=HostUser)


class SchedulingType(str, Enum):
    ROUND_ROBIN = "roundRobin"
    COLLECTIVE = "collective"
    MANAGED = "managed"


class BookingStatus(str, Enum):
    ACCEPTED = "accepted"
    PENDING = "pending"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


@dataclass(slots=True, frozen=True)
class User:
    """User payload with credentials already loaded by upstream code."""

    id: int
    email: str
    name: str | None = None
    credentials: tuple[Any, ...] = ()


@dataclass(slots=True, frozen=True)
class Host(Generic[UserT]):
    """One candidate assignee of an event type."""

    user: UserT
    is_fixed: bool = False
    created_at: datetime | None = None  # never defaulted to "now"
    priority: int | None = None
    weight: int | None = None
    group_id: str | None = None


@dataclass(slots=True)
class EventType:
    """Read-only event type snapshot handed to the pipeline."""

    id: int
    scheduling_type: SchedulingType | None = None
    team_id: int | None = None
    hosts: list[Any] | None = None
    users: list[User] = field(default_factory=list)
    is_rr_weights_enabled: bool = False
    reschedule_with_same_round_robin_host: bool = False
    max_lead_threshold: int | None = None
    include_no_show_in_rr_calculation: bool = False
    assign_rr_members_using_segment: bool = False
    segment_member_ids: list[int] | None = None

    @property
    def is_collective(self) -> bool:
        return self.scheduling_type == SchedulingType.COLLECTIVE


@dataclass(slots=True, frozen=True)
class BookingRecord:
    """Booking snapshot used by the continuity and fairness collaborators."""

    uid: str
    user_id: int | None
    event_type_id: int | None
    created_at: datetime | None = None
    status: BookingStatus = BookingStatus.ACCEPTED
    no_show_host: bool = False


@dataclass(slots=True)
class NormalizedHosts(Generic[UserT]):
    """
    Output of a HostSource.

    ``hosts is None`` means the event type is not a segmented team event and
    the pipeline must use ``fallback_hosts`` as-is.
    """

    hosts: list[Host[UserT]] | None
    fallback_hosts: list[Host[UserT]]


@dataclass(slots=True)
class QualificationResult(Generic[UserT]):
    """Final qualified sets produced by the pipeline."""

    qualified_rr_hosts: list[Host[UserT]]
    fixed_hosts: list[Host[UserT]]
    # all hosts to fall back to, including the qualified ones (fairness + contact owner)
    all_fallback_rr_hosts: list[Host[UserT]] | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary, leaving out the fallback pool when absent."""
        data = {
            "qualified_rr_hosts": [_host_to_dict(h) for h in self.qualified_rr_hosts],
            "fixed_hosts": [_host_to_dict(h) for h in self.fixed_hosts],
        }
        if self.all_fallback_rr_hosts is not None:
            data["all_fallback_rr_hosts"] = [_host_to_dict(h) for h in self.all_fallback_rr_hosts]
        return data


def _host_to_dict(host: Host) -> dict:
    return {
        "user_id": host.user.id,
        "email": host.user.email,
        "is_fixed": host.is_fixed,
        "created_at": host.created_at.isoformat() if host.created_at else None,
        "priority": host.priority,
        "weight": host.weight,
        "group_id": host.group_id,
    }
