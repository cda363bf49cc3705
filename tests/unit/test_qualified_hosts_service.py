import pytest

from app.features.host_qualification.domain.models import EventType, SchedulingType
from app.features.host_qualification.services.contracts import HostSourceError


def _ids(hosts):
    return [h.user.id for h in hosts]


@pytest.mark.asyncio
async def test_no_narrowing_returns_all_hosts_without_fallback(
    build_service, hosts_abc, round_robin_event_type
):
    service = build_service(hosts_abc)

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=round_robin_event_type,
        reschedule_uid=None,
        routed_team_member_ids=[],
        contact_owner_email=None,
    )

    assert _ids(result.qualified_rr_hosts) == [1, 2, 3]
    assert result.fixed_hosts == []
    assert result.all_fallback_rr_hosts is None


@pytest.mark.asyncio
async def test_fairness_narrowing_reports_wider_pool(
    build_service, fake_filter, hosts_abc, round_robin_event_type
):
    service = build_service(hosts_abc, fairness=fake_filter(keep_ids={1}))

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=round_robin_event_type
    )

    assert _ids(result.qualified_rr_hosts) == [1]
    assert _ids(result.all_fallback_rr_hosts) == [1, 2, 3]


@pytest.mark.asyncio
async def test_all_stages_matching_nobody_keeps_event_bookable(
    build_service, fake_filter, hosts_abc, round_robin_event_type
):
    service = build_service(
        hosts_abc,
        continuity=fake_filter(keep_ids=set()),
        segment=fake_filter(keep_ids=set()),
        fairness=fake_filter(keep_ids=set()),
    )

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=round_robin_event_type,
        routed_team_member_ids=[99],
        contact_owner_email="nobody@example.com",
    )

    assert _ids(result.qualified_rr_hosts) == [1, 2, 3]
    assert result.all_fallback_rr_hosts is None


@pytest.mark.asyncio
async def test_continuity_singleton_short_circuits_later_stages(
    build_service, fake_filter, hosts_abc, round_robin_event_type
):
    segment = fake_filter(keep_ids={3})
    fairness = fake_filter(keep_ids={3})
    service = build_service(
        hosts_abc, continuity=fake_filter(keep_ids={2}), segment=segment, fairness=fairness
    )

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=round_robin_event_type, reschedule_uid="booking-1"
    )

    assert _ids(result.qualified_rr_hosts) == [2]
    assert result.all_fallback_rr_hosts is None
    assert segment.calls == []
    assert fairness.calls == []


@pytest.mark.asyncio
async def test_segment_singleton_short_circuits_fairness(
    build_service, fake_filter, hosts_abc, round_robin_event_type
):
    fairness = fake_filter(keep_ids={1})
    service = build_service(hosts_abc, segment=fake_filter(keep_ids={3}), fairness=fairness)

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=round_robin_event_type, contact_owner_email="host1@example.com"
    )

    assert _ids(result.qualified_rr_hosts) == [3]
    assert result.all_fallback_rr_hosts is None
    assert fairness.calls == []


@pytest.mark.asyncio
async def test_segment_receives_continuity_output(
    build_service, fake_filter, hosts_abc, round_robin_event_type
):
    segment = fake_filter()
    service = build_service(hosts_abc, continuity=fake_filter(keep_ids={1, 2}), segment=segment)

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=round_robin_event_type
    )

    assert _ids(segment.calls[0]["hosts"]) == [1, 2]
    assert _ids(result.qualified_rr_hosts) == [1, 2]


@pytest.mark.asyncio
async def test_contact_owner_overrides_routed_singleton(
    build_service, hosts_abc, round_robin_event_type
):
    service = build_service(hosts_abc)

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=round_robin_event_type,
        routed_team_member_ids=[1],
        contact_owner_email="host2@example.com",
    )

    assert _ids(result.qualified_rr_hosts) == [2]
    assert _ids(result.all_fallback_rr_hosts) == [1, 2]


@pytest.mark.asyncio
async def test_contact_owner_same_as_routed_singleton_is_not_duplicated(
    build_service, hosts_abc, round_robin_event_type
):
    service = build_service(hosts_abc)

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=round_robin_event_type,
        routed_team_member_ids=[2],
        contact_owner_email="host2@example.com",
    )

    assert _ids(result.qualified_rr_hosts) == [2]
    assert _ids(result.all_fallback_rr_hosts) == [2]


@pytest.mark.asyncio
async def test_routed_singleton_without_contact_owner_skips_fairness(
    build_service, fake_filter, hosts_abc, round_robin_event_type
):
    fairness = fake_filter(keep_ids={3})
    service = build_service(hosts_abc, fairness=fairness)

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=round_robin_event_type, routed_team_member_ids=[1]
    )

    assert _ids(result.qualified_rr_hosts) == [1]
    assert result.all_fallback_rr_hosts is None
    assert fairness.calls == []


@pytest.mark.asyncio
async def test_contact_owner_wins_after_fairness(
    build_service, fake_filter, hosts_abc, round_robin_event_type
):
    service = build_service(hosts_abc, fairness=fake_filter(keep_ids={1}))

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=round_robin_event_type,
        routed_team_member_ids=[1, 2],
        contact_owner_email="host3@example.com",
    )

    assert _ids(result.qualified_rr_hosts) == [3]
    assert _ids(result.all_fallback_rr_hosts) == [1, 3]


@pytest.mark.asyncio
async def test_fairness_runs_on_routed_members(
    build_service, fake_filter, hosts_abc, round_robin_event_type
):
    fairness = fake_filter(keep_ids={2})
    service = build_service(hosts_abc, fairness=fairness)

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=round_robin_event_type,
        routed_team_member_ids=[2, 3],
        routing_form_response={"response": {"region": "emea"}},
    )

    call = fairness.calls[0]
    assert _ids(call["hosts"]) == [2, 3]
    assert call["routing_form_response"] == {"response": {"region": "emea"}}
    assert _ids(result.qualified_rr_hosts) == [2]
    assert _ids(result.all_fallback_rr_hosts) == [2, 3]


@pytest.mark.asyncio
async def test_fixed_hosts_unaffected_by_narrowing(build_service, fake_filter, host_factory):
    hosts = [host_factory(10, is_fixed=True), host_factory(1), host_factory(2), host_factory(3)]
    event_type = EventType(id=1, scheduling_type=SchedulingType.ROUND_ROBIN, team_id=7)

    plain = await build_service(hosts).find_qualified_hosts_with_delegation_credentials(
        event_type=event_type
    )
    narrowed = await build_service(
        hosts, continuity=fake_filter(keep_ids={2}), fairness=fake_filter(keep_ids={3})
    ).find_qualified_hosts_with_delegation_credentials(event_type=event_type)

    assert plain.fixed_hosts == narrowed.fixed_hosts
    assert _ids(plain.fixed_hosts) == [10]


@pytest.mark.asyncio
async def test_duplicate_hosts_collapse_to_first_occurrence(
    build_service, host_factory, round_robin_event_type
):
    first = host_factory(1, priority=2)
    duplicate = host_factory(1, priority=5)
    service = build_service([first, duplicate, host_factory(2)])

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=round_robin_event_type
    )

    assert _ids(result.qualified_rr_hosts) == [1, 2]
    assert result.qualified_rr_hosts[0].priority == 2


@pytest.mark.asyncio
async def test_repeated_runs_yield_identical_output(
    build_service, fake_filter, hosts_abc, round_robin_event_type
):
    service = build_service(hosts_abc, fairness=fake_filter(keep_ids={1, 3}))
    kwargs = {"event_type": round_robin_event_type, "contact_owner_email": None}

    first = await service.find_qualified_hosts_with_delegation_credentials(**kwargs)
    second = await service.find_qualified_hosts_with_delegation_credentials(**kwargs)

    assert first == second


@pytest.mark.asyncio
async def test_collective_event_forces_every_host_fixed(build_service, host_factory):
    hosts = [host_factory(1, is_fixed=False), host_factory(2, is_fixed=True)]
    event_type = EventType(id=3, scheduling_type=SchedulingType.COLLECTIVE, team_id=7)

    result = await build_service(hosts).find_qualified_hosts_with_delegation_credentials(
        event_type=event_type
    )

    assert _ids(result.fixed_hosts) == [1, 2]
    assert all(h.is_fixed for h in result.fixed_hosts)
    assert result.qualified_rr_hosts == []
    assert result.all_fallback_rr_hosts is None


@pytest.mark.asyncio
async def test_non_segmented_event_uses_fallback_hosts(build_service, host_factory):
    fallback = [
        host_factory(1, is_fixed=True, priority=3, group_id="g"),
        host_factory(2, weight=50),
        host_factory(2),
    ]
    service = build_service(None, fallback_hosts=fallback)

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=EventType(id=5)
    )

    assert _ids(result.fixed_hosts) == [1]
    assert result.fixed_hosts[0].priority is None
    assert result.fixed_hosts[0].group_id is None
    assert _ids(result.qualified_rr_hosts) == [2]
    assert result.qualified_rr_hosts[0].weight is None
    assert result.all_fallback_rr_hosts is None


@pytest.mark.asyncio
async def test_non_segmented_event_skips_collaborators(build_service, fake_filter, host_factory):
    continuity = fake_filter()
    segment = fake_filter()
    fairness = fake_filter()
    service = build_service(
        None,
        fallback_hosts=[host_factory(1)],
        continuity=continuity,
        segment=segment,
        fairness=fairness,
    )

    await service.find_qualified_hosts_with_delegation_credentials(event_type=EventType(id=5))

    assert continuity.calls == segment.calls == fairness.calls == []


@pytest.mark.asyncio
async def test_created_at_is_preserved_as_none(build_service, host_factory, round_robin_event_type):
    service = build_service([host_factory(1), host_factory(2)])

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=round_robin_event_type
    )

    assert all(h.created_at is None for h in result.qualified_rr_hosts)


@pytest.mark.asyncio
async def test_collaborator_failure_propagates(
    build_service, fake_filter, hosts_abc, round_robin_event_type
):
    error = HostSourceError("calendar credentials unavailable", event_type_id=42)
    service = build_service(hosts_abc, segment=fake_filter(error=error))

    with pytest.raises(HostSourceError) as exc:
        await service.find_qualified_hosts_with_delegation_credentials(
            event_type=round_robin_event_type
        )

    assert exc.value is error


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "continuity_ids,segment_ids,fairness_ids,routed,owner",
    [
        (set(), set(), set(), [], None),
        ({1, 2}, set(), {99}, [3], "missing@example.com"),
        (None, {2, 3}, set(), [7, 8], None),
        (set(), None, {3}, [1, 3], "host1@example.com"),
    ],
)
async def test_qualified_hosts_never_empty(
    build_service,
    fake_filter,
    hosts_abc,
    round_robin_event_type,
    continuity_ids,
    segment_ids,
    fairness_ids,
    routed,
    owner,
):
    service = build_service(
        hosts_abc,
        continuity=fake_filter(keep_ids=continuity_ids),
        segment=fake_filter(keep_ids=segment_ids),
        fairness=fake_filter(keep_ids=fairness_ids),
    )

    result = await service.find_qualified_hosts_with_delegation_credentials(
        event_type=round_robin_event_type,
        routed_team_member_ids=routed,
        contact_owner_email=owner,
    )

    assert result.qualified_rr_hosts
