"""
Pipeline components for host qualification.

Pure helpers shared by the qualification service: host normalization,
deduplication and the fallback-preserving filter combinator.
"""

from .normalization import (
    apply_filter_with_fallback,
    dedupe_by_user_id,
    ensure_host_properties,
    get_fallback_with_contact_owner,
    is_fixed_host,
    is_round_robin_host,
    normalize_and_dedupe,
)

__all__ = [
    "apply_filter_with_fallback",
    "dedupe_by_user_id",
    "ensure_host_properties",
    "get_fallback_with_contact_owner",
    "is_fixed_host",
    "is_round_robin_host",
    "normalize_and_dedupe",
]
