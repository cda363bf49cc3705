"""
Host source: turns an event type snapshot into normalized hosts.

Team event types with an explicit host list are "segmented" and go through
the full qualification cascade. Anything else is answered from the
fallback list built out of the event type's users.
"""

from collections.abc import Awaitable, Callable

from app.features.host_qualification.domain.models import (
    EventType,
    Host,
    NormalizedHosts,
    SchedulingType,
    User,
)
from app.features.host_qualification.pipeline.normalization import ensure_host_properties
from app.features.host_qualification.services.contracts import HostSourceError
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

CredentialLoader = Callable[[list[User]], Awaitable[list[User]]]


class EventTypeHostSource:
    """
    Default HostSource.

    An optional ``credential_loader`` enriches user payloads (for example
    with delegation credentials) before hosts are built. Its failures
    propagate to the caller.
    """

    def __init__(self, credential_loader: CredentialLoader | None = None):
        self._credential_loader = credential_loader

    async def normalize(self, event_type: EventType) -> NormalizedHosts:
        segmented = bool(event_type.team_id and event_type.hosts)
        hosts = ensure_host_properties(event_type.hosts) if segmented else []

        # one credential load covers event type users and host users alike
        combined: dict[int, User] = {}
        for user in [*event_type.users, *(h.user for h in hosts)]:
            combined.setdefault(user.id, user)
        loaded = await self._load_users(event_type, list(combined.values()))
        by_id = {user.id: user for user in loaded}

        fallback_hosts = self._users_as_hosts(
            event_type, [by_id.get(user.id, user) for user in event_type.users]
        )

        if not segmented:
            logger.debug(
                "Event type is not a segmented team event",
                event_type_id=event_type.id,
                fallback_count=len(fallback_hosts),
            )
            return NormalizedHosts(hosts=None, fallback_hosts=fallback_hosts)

        hosts = [
            Host(
                user=by_id.get(h.user.id, h.user),
                is_fixed=h.is_fixed,
                created_at=h.created_at,
                priority=h.priority,
                weight=h.weight,
                group_id=h.group_id,
            )
            for h in hosts
        ]
        return NormalizedHosts(hosts=hosts, fallback_hosts=fallback_hosts)

    async def _load_users(self, event_type: EventType, users: list[User]) -> list[User]:
        if self._credential_loader is None or not users:
            return users

        try:
            return await self._credential_loader(users)
        except HostSourceError:
            raise
        except Exception as e:
            raise HostSourceError(
                f"Failed to load credentials for event type hosts: {e}",
                event_type_id=event_type.id,
            ) from e

    def _users_as_hosts(self, event_type: EventType, users: list[User]) -> list[Host]:
        is_fixed = (
            event_type.scheduling_type is None
            or event_type.scheduling_type == SchedulingType.COLLECTIVE
        )
        return [Host(user=user, is_fixed=is_fixed) for user in users]
