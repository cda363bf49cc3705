"""
Service layer for the host qualification feature.
"""

from .continuity_filter import SameRoundRobinHostFilter
from .contracts import (
    BookingRepository,
    ContinuityFilter,
    FairnessFilter,
    HostQualificationError,
    HostSource,
    HostSourceError,
    SegmentMatcher,
)
from .fairness_filter import LeadThresholdFilter
from .host_source import EventTypeHostSource
from .qualified_hosts_service import QualifiedHostsService
from .segment_matcher import EventSegmentMatcher

__all__ = [
    "BookingRepository",
    "ContinuityFilter",
    "EventSegmentMatcher",
    "EventTypeHostSource",
    "FairnessFilter",
    "HostQualificationError",
    "HostSource",
    "HostSourceError",
    "LeadThresholdFilter",
    "QualifiedHostsService",
    "SameRoundRobinHostFilter",
    "SegmentMatcher",
]
