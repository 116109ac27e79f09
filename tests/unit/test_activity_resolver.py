"""
Unit tests for last-activity resolution.
"""
import pytest
from datetime import datetime, timedelta, UTC

from leadwatch.repositories.activity_repo import (
    LeadRecordActivityProvider,
    default_activity_providers,
)
from leadwatch.models.lead import Lead
from leadwatch.services.activity_resolver import ActivityResolver, as_utc, hours_between


class StaticProvider:
    """In-memory provider returning a fixed timestamp per lead."""

    def __init__(self, name: str, timestamps: dict):
        self.name = name
        self.timestamps = timestamps

    async def latest_timestamp_for_lead(self, lead_id):
        return self.timestamps.get(lead_id)


# ──────────────────────────────────────────────
# Time helpers
# ──────────────────────────────────────────────

class TestTimeHelpers:
    def test_naive_timestamp_is_read_as_utc(self):
        naive = datetime(2026, 3, 1, 8, 30)
        assert as_utc(naive) == datetime(2026, 3, 1, 8, 30, tzinfo=UTC)

    def test_aware_timestamp_is_converted_to_utc(self):
        from datetime import timezone
        plus_two = datetime(2026, 3, 1, 10, 30, tzinfo=timezone(timedelta(hours=2)))
        assert as_utc(plus_two) == datetime(2026, 3, 1, 8, 30, tzinfo=UTC)

    def test_hours_between_mixes_naive_and_aware(self):
        earlier = datetime(2026, 3, 1, 0, 0)
        later = datetime(2026, 3, 3, 6, 0, tzinfo=UTC)
        assert hours_between(earlier, later) == 54.0


# ──────────────────────────────────────────────
# Resolution over registered providers
# ──────────────────────────────────────────────

@pytest.mark.asyncio
async def test_resolves_maximum_across_providers(now):
    resolver = ActivityResolver([
        StaticProvider("notes", {1: now - timedelta(hours=80)}),
        StaticProvider("appointments", {1: now - timedelta(hours=10)}),
        StaticProvider("quotes", {1: now - timedelta(hours=30)}),
    ])

    assert await resolver.resolve_last_activity(1) == now - timedelta(hours=10)


@pytest.mark.asyncio
async def test_no_records_anywhere_is_absent(now):
    resolver = ActivityResolver([
        StaticProvider("notes", {}),
        StaticProvider("quotes", {2: now}),
    ])

    assert await resolver.resolve_last_activity(1) is None
    assert await resolver.hours_inactive(1, now) is None


@pytest.mark.asyncio
async def test_registering_newer_source_never_moves_result_backwards(now):
    resolver = ActivityResolver([StaticProvider("notes", {1: now - timedelta(hours=5)})])
    before = await resolver.resolve_last_activity(1)

    resolver.register(StaticProvider("calls", {1: now - timedelta(hours=100)}))
    assert await resolver.resolve_last_activity(1) == before

    resolver.register(StaticProvider("emails", {1: now - timedelta(hours=1)}))
    assert await resolver.resolve_last_activity(1) == now - timedelta(hours=1)


@pytest.mark.asyncio
async def test_hours_inactive(now):
    resolver = ActivityResolver([StaticProvider("notes", {1: now - timedelta(hours=49, minutes=30)})])
    assert await resolver.hours_inactive(1, now) == pytest.approx(49.5)


# ──────────────────────────────────────────────
# Database-backed providers
# ──────────────────────────────────────────────

@pytest.mark.asyncio
async def test_default_providers_read_notes_appointments_and_quotes(
    db_session, rep, make_lead, add_activity, now
):
    lead = await make_lead(rep, note_at=now - timedelta(hours=90))
    await add_activity(lead, "quote", now - timedelta(hours=60))
    await add_activity(lead, "appointment", now - timedelta(hours=20))

    resolver = ActivityResolver(default_activity_providers(db_session))
    last_activity = await resolver.resolve_last_activity(lead.id)

    assert last_activity == now - timedelta(hours=20)
    assert last_activity.tzinfo is not None


@pytest.mark.asyncio
async def test_lead_without_activity_records_is_absent(db_session, rep, make_lead):
    lead = await make_lead(rep)
    resolver = ActivityResolver(default_activity_providers(db_session))

    assert await resolver.resolve_last_activity(lead.id) is None


@pytest.mark.asyncio
async def test_lead_updates_provider_is_opt_in(db_session, rep, make_lead):
    lead = await make_lead(rep)

    providers = default_activity_providers(db_session, include_lead_updates=True)
    assert [p.name for p in providers] == ["notes", "appointments", "quotes", "lead_updates"]

    resolver = ActivityResolver(providers)
    assert await resolver.resolve_last_activity(lead.id) is not None


@pytest.mark.asyncio
async def test_generic_provider_maps_any_timestamp_column(db_session, rep, make_lead):
    lead = await make_lead(rep)
    provider = LeadRecordActivityProvider(
        db_session, Lead, "lead_created", timestamp_attr="created_at", lead_attr="id"
    )

    found = await provider.latest_timestamp_for_lead(lead.id)
    assert found is not None
    assert await provider.latest_timestamp_for_lead(lead.id + 100) is None
