"""
Qualified hosts service - narrows an event type's hosts to the ones eligible
for a booking.

Fixed hosts always attend. Round-robin hosts pass through a cascade of
narrowing stages (same-host continuity, segment, contact owner / routed
members, lead threshold fairness). Every stage goes through
``apply_filter_with_fallback`` so the event always stays bookable, and a
single remaining host ends the cascade.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from app.features.host_qualification.domain.models import EventType, Host, QualificationResult
from app.features.host_qualification.pipeline.normalization import (
    apply_filter_with_fallback,
    dedupe_by_user_id,
    ensure_host_properties,
    get_fallback_with_contact_owner,
    is_fixed_host,
    is_round_robin_host,
    normalize_and_dedupe,
)
from app.features.host_qualification.services.contracts import (
    ContinuityFilter,
    FairnessFilter,
    HostSource,
    SegmentMatcher,
)
from app.infrastructure.observability.logging import get_logger
from app.infrastructure.observability.reporting import with_reporting

logger = get_logger(__name__)


class QualifiedHostsService:
    """
    Orchestrates the host qualification cascade.

    Collaborators are awaited strictly one after another; their failures
    propagate unchanged.
    """

    def __init__(
        self,
        host_source: HostSource,
        continuity_filter: ContinuityFilter,
        segment_matcher: SegmentMatcher,
        fairness_filter: FairnessFilter,
    ):
        self.host_source = host_source
        self.continuity_filter = continuity_filter
        self.segment_matcher = segment_matcher
        self.fairness_filter = fairness_filter
        self.find_qualified_hosts_with_delegation_credentials = with_reporting(
            self._find_qualified_hosts_with_delegation_credentials,
            "find_qualified_hosts_with_delegation_credentials",
        )

    async def _find_qualified_hosts_with_delegation_credentials(
        self,
        *,
        event_type: EventType,
        reschedule_uid: str | None = None,
        routed_team_member_ids: list[int] | None = None,
        contact_owner_email: str | None = None,
        routing_form_response: Any | None = None,
    ) -> QualificationResult:
        """
        Find the fixed hosts and qualified round-robin hosts for a booking.

        Args:
            event_type: Event type snapshot with its hosts and users
            reschedule_uid: UID of the booking being rescheduled, if any
            routed_team_member_ids: Team members pre-selected by routing
            contact_owner_email: CRM contact owner of the booker
            routing_form_response: Passed through to the fairness filter

        Returns:
            QualificationResult with qualified_rr_hosts never empty when
            round-robin hosts existed
        """
        routed_team_member_ids = routed_team_member_ids or []

        normalized = await self.host_source.normalize(event_type)

        # not a team event type, or some other reason - segment matching isn't necessary
        if normalized.hosts is None:
            return self._fallback_user_result(event_type, normalized.fallback_hosts)

        hosts = ensure_host_properties(normalized.hosts, force_fixed=event_type.is_collective)
        fixed_hosts = dedupe_by_user_id(h for h in hosts if is_fixed_host(h))
        round_robin_hosts = dedupe_by_user_id(h for h in hosts if is_round_robin_host(h))

        logger.debug(
            "Starting host qualification",
            event_type_id=event_type.id,
            fixed_hosts=len(fixed_hosts),
            round_robin_hosts=len(round_robin_hosts),
        )

        hosts_after_same_host = normalize_and_dedupe(
            apply_filter_with_fallback(
                round_robin_hosts,
                await self.continuity_filter.filter(
                    hosts=round_robin_hosts,
                    reschedule_uid=reschedule_uid,
                    reschedule_with_same_round_robin_host=(
                        event_type.reschedule_with_same_round_robin_host
                    ),
                    routed_team_member_ids=routed_team_member_ids,
                ),
            )
        )

        if len(hosts_after_same_host) == 1:
            return self._single_host_result(
                event_type, "same_round_robin_host", hosts_after_same_host, fixed_hosts
            )

        hosts_after_segment = normalize_and_dedupe(
            apply_filter_with_fallback(
                hosts_after_same_host,
                await self.segment_matcher.filter(
                    event_type=event_type, hosts=hosts_after_same_host
                ),
            )
        )

        if len(hosts_after_segment) == 1:
            return self._single_host_result(event_type, "segment", hosts_after_segment, fixed_hosts)

        # if segment matching doesn't return any hosts we fall back to all round robin hosts
        official_rr_hosts = hosts_after_segment or hosts_after_same_host

        hosts_after_contact_owner = normalize_and_dedupe(
            apply_filter_with_fallback(
                official_rr_hosts,
                [h for h in official_rr_hosts if h.user.email == contact_owner_email],
            )
        )

        hosts_after_routed_members = normalize_and_dedupe(
            apply_filter_with_fallback(
                official_rr_hosts,
                [h for h in official_rr_hosts if h.user.id in routed_team_member_ids],
            )
        )

        if len(hosts_after_routed_members) == 1:
            if len(hosts_after_contact_owner) == 1:
                logger.info(
                    "Contact owner overrides routed team member",
                    event_type_id=event_type.id,
                    contact_owner_id=hosts_after_contact_owner[0].user.id,
                    routed_member_id=hosts_after_routed_members[0].user.id,
                )
                return QualificationResult(
                    qualified_rr_hosts=normalize_and_dedupe(hosts_after_contact_owner),
                    all_fallback_rr_hosts=normalize_and_dedupe(
                        get_fallback_with_contact_owner(
                            hosts_after_routed_members, hosts_after_contact_owner[0]
                        )
                    ),
                    fixed_hosts=normalize_and_dedupe(fixed_hosts),
                )
            return self._single_host_result(
                event_type, "routed_team_member", hosts_after_routed_members, fixed_hosts
            )

        hosts_after_fairness = normalize_and_dedupe(
            apply_filter_with_fallback(
                hosts_after_routed_members,
                await self.fairness_filter.filter(
                    event_type=event_type,
                    hosts=hosts_after_routed_members,
                    max_lead_threshold=event_type.max_lead_threshold,
                    routing_form_response=routing_form_response,
                ),
            )
        )

        if len(hosts_after_contact_owner) == 1:
            return QualificationResult(
                qualified_rr_hosts=normalize_and_dedupe(hosts_after_contact_owner),
                all_fallback_rr_hosts=normalize_and_dedupe(
                    get_fallback_with_contact_owner(
                        hosts_after_fairness, hosts_after_contact_owner[0]
                    )
                ),
                fixed_hosts=normalize_and_dedupe(fixed_hosts),
            )

        # only report the wider pool if fairness filtering excluded someone
        fairness_narrowed = len(hosts_after_fairness) != len(hosts_after_routed_members)
        logger.debug(
            "Fairness stage completed",
            event_type_id=event_type.id,
            qualified=len(hosts_after_fairness),
            fairness_narrowed=fairness_narrowed,
        )
        return QualificationResult(
            qualified_rr_hosts=normalize_and_dedupe(hosts_after_fairness),
            all_fallback_rr_hosts=(
                normalize_and_dedupe(hosts_after_routed_members) if fairness_narrowed else None
            ),
            fixed_hosts=normalize_and_dedupe(fixed_hosts),
        )

    def _single_host_result(
        self, event_type: EventType, stage: str, hosts: list[Host], fixed_hosts: list[Host]
    ) -> QualificationResult:
        logger.info(
            "Single qualified host found, ending cascade",
            event_type_id=event_type.id,
            stage=stage,
            host_id=hosts[0].user.id,
        )
        return QualificationResult(
            qualified_rr_hosts=normalize_and_dedupe(hosts),
            fixed_hosts=normalize_and_dedupe(fixed_hosts),
        )

    def _fallback_user_result(
        self, event_type: EventType, fallback_hosts: list[Host]
    ) -> QualificationResult:
        fallback_hosts = ensure_host_properties(fallback_hosts)
        fixed_hosts = [
            replace(h, is_fixed=True, priority=None, weight=None, group_id=None)
            for h in fallback_hosts
            if is_fixed_host(h)
        ]
        round_robin_hosts = [
            replace(h, is_fixed=False, priority=None, weight=None, group_id=None)
            for h in fallback_hosts
            if is_round_robin_host(h)
        ]

        logger.debug(
            "Using fallback hosts for non-segmented event type",
            event_type_id=event_type.id,
            fixed_hosts=len(fixed_hosts),
            round_robin_hosts=len(round_robin_hosts),
        )
        return QualificationResult(
            qualified_rr_hosts=normalize_and_dedupe(round_robin_hosts),
            fixed_hosts=normalize_and_dedupe(fixed_hosts),
        )
