"""
Integration tests for the admin reporting endpoints.
"""
import pytest
from datetime import datetime, timedelta, UTC

from httpx import AsyncClient

from leadwatch.models.lead import LeadStatus


@pytest.fixture
async def quiet_leads(rep, other_rep, make_lead):
    recent = datetime.now(UTC)
    return {
        "fresh": await make_lead(rep, note_at=recent - timedelta(hours=5)),
        "rep_60h": await make_lead(rep, note_at=recent - timedelta(hours=60)),
        "rep_100h": await make_lead(rep, note_at=recent - timedelta(hours=100)),
        "other_70h": await make_lead(other_rep, note_at=recent - timedelta(hours=70)),
    }


@pytest.mark.asyncio
async def test_follow_ups_report(client: AsyncClient, auth_headers, admin, rep, quiet_leads):
    response = await client.get("/api/v1/admin/follow-ups", headers=auth_headers(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["summary"]["total_inactive_leads"] == 3
    assert body["summary"]["total_unacknowledged_tasks"] == 0
    listed = {item["lead_id"] for item in body["inactive_leads"]}
    assert quiet_leads["fresh"].id not in listed

    stats = {s["id"]: s for s in body["summary"]["owner_stats"]}
    assert stats[rep.id]["inactive_count"] == 2
    assert stats[rep.id]["average_hours_inactive"] in (79, 80)


@pytest.mark.asyncio
async def test_follow_ups_filters(client: AsyncClient, auth_headers, admin, other_rep, quiet_leads):
    response = await client.get(
        "/api/v1/admin/follow-ups",
        params={"owner_id": other_rep.id},
        headers=auth_headers(admin),
    )
    assert [i["lead_id"] for i in response.json()["inactive_leads"]] == [quiet_leads["other_70h"].id]

    response = await client.get(
        "/api/v1/admin/follow-ups",
        params={"hours_min": 0, "hours_max": 65},
        headers=auth_headers(admin),
    )
    listed = {i["lead_id"] for i in response.json()["inactive_leads"]}
    assert listed == {quiet_leads["fresh"].id, quiet_leads["rep_60h"].id}

    response = await client.get(
        "/api/v1/admin/follow-ups",
        params={"task_status": "pending"},
        headers=auth_headers(admin),
    )
    assert response.json()["inactive_leads"] == []


@pytest.mark.asyncio
async def test_follow_ups_bad_arguments(client: AsyncClient, auth_headers, admin):
    response = await client.get(
        "/api/v1/admin/follow-ups",
        params={"task_status": "whatever"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_argument"

    response = await client.get(
        "/api/v1/admin/follow-ups",
        params={"hours_min": 90, "hours_max": 10},
        headers=auth_headers(admin),
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_follow_ups_non_finite_hours(client: AsyncClient, auth_headers, admin, rep, make_lead):
    await make_lead(rep, note_at=datetime.now(UTC) - timedelta(hours=1))

    for params in ({"hours_min": "nan"}, {"hours_max": "nan"}, {"hours_min": "inf"}):
        response = await client.get(
            "/api/v1/admin/follow-ups", params=params, headers=auth_headers(admin)
        )
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == "invalid_argument"
        assert detail["context"] == {"field": next(iter(params))}


@pytest.mark.asyncio
async def test_reporting_is_admin_only(client: AsyncClient, auth_headers, rep):
    response = await client.get("/api/v1/admin/follow-ups", headers=auth_headers(rep))
    assert response.status_code == 403

    response = await client.get("/api/v1/dashboard/team-performance", headers=auth_headers(rep))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_team_performance(client: AsyncClient, auth_headers, admin, rep, make_lead, quiet_leads):
    await make_lead(rep, status=LeadStatus.WON, closed_at=datetime.now(UTC) - timedelta(days=1))

    response = await client.get("/api/v1/dashboard/team-performance", headers=auth_headers(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["lookback_days"] == 30
    top = body["stats"][0]
    assert top["user_id"] == rep.id
    assert top["won_leads"] == 1
    assert top["won_in_period"] == 1
    assert top["total_leads"] == 4
    assert top["overdue_follow_ups"] == 2
