import pytest

from app.features.host_qualification.domain.models import (
    EventType,
    Host,
    NormalizedHosts,
    SchedulingType,
    User,
)
from app.features.host_qualification.services.qualified_hosts_service import (
    QualifiedHostsService,
)


def make_host(user_id: int, is_fixed: bool = False, **overrides) -> Host:
    user = User(id=user_id, email=overrides.pop("email", f"host{user_id}@example.com"))
    return Host(user=user, is_fixed=is_fixed, **overrides)


class FakeHostSource:
    def __init__(self, hosts=None, fallback_hosts=None):
        self.hosts = hosts
        self.fallback_hosts = fallback_hosts or []
        self.calls = 0

    async def normalize(self, event_type):
        self.calls += 1
        return NormalizedHosts(hosts=self.hosts, fallback_hosts=self.fallback_hosts)


class FakeFilter:
    """Returns the hosts whose ids are in ``keep_ids``; passthrough when None."""

    def __init__(self, keep_ids=None, error: Exception | None = None):
        self.keep_ids = keep_ids
        self.error = error
        self.calls: list[dict] = []

    async def filter(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        hosts = kwargs["hosts"]
        if self.keep_ids is None:
            return hosts
        return [h for h in hosts if h.user.id in self.keep_ids]


@pytest.fixture
def host_factory():
    return make_host


@pytest.fixture
def fake_filter():
    return FakeFilter


@pytest.fixture
def hosts_abc():
    return [make_host(1), make_host(2), make_host(3)]


@pytest.fixture
def round_robin_event_type():
    return EventType(id=42, scheduling_type=SchedulingType.ROUND_ROBIN, team_id=7)


@pytest.fixture
def build_service():
    def _build(hosts, fallback_hosts=None, continuity=None, segment=None, fairness=None):
        return QualifiedHostsService(
            host_source=FakeHostSource(hosts, fallback_hosts),
            continuity_filter=continuity or FakeFilter(),
            segment_matcher=segment or FakeFilter(),
            fairness_filter=fairness or FakeFilter(),
        )

    return _build
