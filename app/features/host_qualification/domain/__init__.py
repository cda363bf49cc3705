"""
Domain subpackage for the host qualification feature.
"""

from .models import (
    BookingRecord,
    BookingStatus,
    EventType,
    Host,
    HostUser,
    NormalizedHosts,
    QualificationResult,
    SchedulingType,
    User,
)

__all__ = [
    "BookingRecord",
    "BookingStatus",
    "EventType",
    "Host",
    "HostUser",
    "NormalizedHosts",
    "QualificationResult",
    "SchedulingType",
    "User",
]
