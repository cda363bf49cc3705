"""
Host normalization helpers.

Every host leaving these helpers has all optional fields materialized:
``is_fixed`` is a strict bool and missing ``created_at``, ``priority``,
``weight`` and ``group_id`` become ``None``. ``created_at`` is never
invented here because fairness ordering depends on it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, TypeVar

from app.features.host_qualification.domain.models import Host, User
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# camelCase keys produced by upstream loaders -> Host field names
_FIELD_ALIASES = {
    "isFixed": "is_fixed",
    "createdAt": "created_at",
    "groupId": "group_id",
}


def _read(raw: Any, name: str) -> Any:
    if isinstance(raw, Mapping):
        if name in raw:
            return raw[name]
        for alias, canonical in _FIELD_ALIASES.items():
            if canonical == name and alias in raw:
                return raw[alias]
        return None
    return getattr(raw, name, None)


def _read_user(raw: Any) -> Any:
    user = _read(raw, "user")
    if isinstance(user, Mapping):
        return User(
            id=user["id"],
            email=user["email"],
            name=user.get("name"),
            credentials=tuple(user.get("credentials") or ()),
        )
    return user


def ensure_host_properties(hosts: Iterable[Any], force_fixed: bool = False) -> list[Host]:
    """
    Build canonical Host records from heterogeneous raw host entries.

    Args:
        hosts: Host instances or mappings (snake_case or camelCase keys);
            a mapping ``user`` is converted to a User
        force_fixed: Mark every host as fixed (collective event types)

    Returns:
        New list of Host records, same order as the input
    """
    normalized = []
    for raw in hosts:
        normalized.append(
            Host(
                user=_read_user(raw),
                is_fixed=True if force_fixed else _read(raw, "is_fixed") is True,
                created_at=_read(raw, "created_at"),
                priority=_read(raw, "priority"),
                weight=_read(raw, "weight"),
                group_id=_read(raw, "group_id"),
            )
        )
    return normalized


def dedupe_by_user_id(hosts: Iterable[Host]) -> list[Host]:
    """Collapse hosts sharing a ``user.id``, keeping the first occurrence."""
    seen: dict[int, Host] = {}
    for host in hosts:
        if host.user.id not in seen:
            seen[host.user.id] = host
    return list(seen.values())


def normalize_and_dedupe(hosts: Iterable[Any]) -> list[Host]:
    return dedupe_by_user_id(ensure_host_properties(hosts))


def is_fixed_host(host: Host) -> bool:
    return host.is_fixed is True


def is_round_robin_host(host: Host) -> bool:
    # anything not explicitly fixed takes part in the rotation
    return host.is_fixed is not True


def apply_filter_with_fallback(current: Sequence[T], narrowed: Sequence[T]) -> list[T]:
    """
    Narrow ``current`` to ``narrowed`` unless the narrowing matched nobody.

    A stage is a narrowing heuristic and never allowed to make an event
    unbookable, so an empty result keeps the current pool.
    """
    if len(narrowed) > 0:
        return list(narrowed)
    if current:
        logger.debug("Filter matched no hosts, keeping current pool", pool_size=len(current))
    return list(current)


def get_fallback_with_contact_owner(
    fallback_hosts: Sequence[Host], contact_owner: Host
) -> list[Host]:
    """Append the contact owner to the fallback pool unless already present."""
    if any(host.user.id == contact_owner.user.id for host in fallback_hosts):
        return list(fallback_hosts)
    return [*fallback_hosts, contact_owner]
