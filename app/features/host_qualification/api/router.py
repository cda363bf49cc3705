"""
Host qualification routes.

Exposes the qualification cascade to the booking workflow. The booking
history travels with the request so every call works on its own snapshot.
"""

import time
from collections.abc import Callable

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from app.features.host_qualification.api.schemas import QualifyHostsRequest, QualifyHostsResponse
from app.features.host_qualification.repository.booking_repository import (
    BookingLookupError,
    SnapshotBookingRepository,
)
from app.features.host_qualification.services import (
    EventSegmentMatcher,
    EventTypeHostSource,
    HostQualificationError,
    LeadThresholdFilter,
    QualifiedHostsService,
    SameRoundRobinHostFilter,
)
from app.features.host_qualification.services.contracts import BookingRepository
from app.infrastructure.observability.logging import get_logger, log_qualification

logger = get_logger(__name__)

router = APIRouter(prefix="/host-qualification", tags=["host-qualification"])

ServiceFactory = Callable[[BookingRepository], QualifiedHostsService]


def build_qualified_hosts_service(booking_repository: BookingRepository) -> QualifiedHostsService:
    """Wire the qualification service with the default collaborators."""
    return QualifiedHostsService(
        host_source=EventTypeHostSource(),
        continuity_filter=SameRoundRobinHostFilter(booking_repository),
        segment_matcher=EventSegmentMatcher(),
        fairness_filter=LeadThresholdFilter(booking_repository),
    )


def get_service_factory() -> ServiceFactory:
    return build_qualified_hosts_service


@router.post("/qualify", response_model=QualifyHostsResponse, response_model_exclude_unset=True)
async def qualify_hosts(
    payload: QualifyHostsRequest,
    service_factory: ServiceFactory = Depends(get_service_factory),
):
    """Return fixed hosts and the qualified round-robin shortlist for a booking."""
    event_type = payload.event_type.to_domain()
    start_time = time.perf_counter()

    # every log line emitted while qualifying carries the event type id
    with structlog.contextvars.bound_contextvars(event_type_id=event_type.id):
        try:
            booking_repository = SnapshotBookingRepository(b.to_domain() for b in payload.bookings)
            service = service_factory(booking_repository)
            result = await service.find_qualified_hosts_with_delegation_credentials(
                event_type=event_type,
                reschedule_uid=payload.reschedule_uid,
                routed_team_member_ids=payload.routed_team_member_ids,
                contact_owner_email=payload.contact_owner_email,
                routing_form_response=payload.routing_form_response,
            )

        except BookingLookupError as e:
            logger.error("Invalid booking snapshot", error=str(e))
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except HostQualificationError as e:
            logger.error(
                "Host qualification collaborator failed",
                error=str(e),
                recoverable=e.recoverable,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to qualify hosts",
            )
        except Exception as e:
            logger.error("Error qualifying hosts", error=str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to qualify hosts",
            )

        log_qualification(
            event_type_id=event_type.id,
            qualified_count=len(result.qualified_rr_hosts),
            fixed_count=len(result.fixed_hosts),
            fallback_count=(
                len(result.all_fallback_rr_hosts)
                if result.all_fallback_rr_hosts is not None
                else None
            ),
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
    return QualifyHostsResponse.from_domain(result)
