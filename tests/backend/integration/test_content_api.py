import pytest

from itembot.config import settings
from itembot.repositories import content, history


pytestmark = pytest.mark.asyncio


async def test_requires_session(client):
    resp = await client.get("/api/v1/me/scenarios")
    assert resp.status_code == 401


async def test_scenarios_listing_and_ownership(client, login_headers, bootstrapped_store, demo_user):
    headers = await login_headers(settings.demo_access_code)
    content.add_scenario_for_user(bootstrapped_store, demo_user.user_id, 2, "second")
    first = content.add_scenario_for_user(bootstrapped_store, demo_user.user_id, 1, "first")
    foreign = content.add_scenario_for_user(bootstrapped_store, 999, 1, "foreign")

    listing = await client.get("/api/v1/me/scenarios", headers=headers)
    assert [s["content"] for s in listing.json()["data"]["items"]] == ["first", "second"]

    one = await client.get(f"/api/v1/me/scenarios/{first.id}", headers=headers)
    assert one.json()["data"]["scenario_number"] == 1

    other = await client.get(f"/api/v1/me/scenarios/{foreign.id}", headers=headers)
    assert other.status_code == 404


async def test_plan_and_reports(client, login_headers, bootstrapped_store, demo_user, clock):
    headers = await login_headers(settings.demo_access_code)
    empty = await client.get("/api/v1/me/plan", headers=headers)
    assert empty.json()["data"] is None

    content.save_plan_for_user(bootstrapped_store, demo_user.user_id, "The plan")
    content.add_report_for_user(bootstrapped_store, demo_user.user_id, "old")
    clock.advance(days=1)
    content.add_report_for_user(bootstrapped_store, demo_user.user_id, "new")

    plan = await client.get("/api/v1/me/plan", headers=headers)
    assert plan.json()["data"]["content"] == "The plan"
    reports = await client.get("/api/v1/me/reports", headers=headers)
    assert [r["content"] for r in reports.json()["data"]["items"]] == ["new", "old"]


async def test_notification_clear_cycle(client, login_headers, bootstrapped_store, demo_user, clock):
    headers = await login_headers(settings.demo_access_code)
    content.save_plan_for_user(bootstrapped_store, demo_user.user_id, "v1")
    content.add_report_for_user(bootstrapped_store, demo_user.user_id, "r1")

    counts = await client.get("/api/v1/me/notifications", headers=headers)
    assert counts.json()["data"] == {"scenarios": 0, "plans": 1, "reports": 1}

    clock.advance(seconds=1)
    await client.post("/api/v1/me/notifications/plans/clear", headers=headers)
    cleared = await client.post("/api/v1/me/notifications/reports/clear", headers=headers)
    assert cleared.json()["data"] == {"scenarios": 0, "plans": 0, "reports": 0}

    clock.advance(seconds=1)
    content.save_plan_for_user(bootstrapped_store, demo_user.user_id, "v2")
    counts = await client.get("/api/v1/me/notifications", headers=headers)
    assert counts.json()["data"]["plans"] == 1


async def test_unknown_user_section(client, login_headers):
    headers = await login_headers(settings.demo_access_code)
    resp = await client.post("/api/v1/me/notifications/logs/clear", headers=headers)
    assert resp.status_code == 422


async def test_captions_list_and_delete(client, login_headers, bootstrapped_store, demo_user):
    headers = await login_headers(settings.demo_access_code)
    mine = content.add_caption(bootstrapped_store, demo_user.user_id, "t", "c", "s")
    foreign = content.add_caption(bootstrapped_store, 999, "t", "c", "s")

    listing = await client.get("/api/v1/me/captions", headers=headers)
    assert [c["id"] for c in listing.json()["data"]["items"]] == [mine.id]

    denied = await client.delete(f"/api/v1/me/captions/{foreign.id}", headers=headers)
    assert denied.status_code == 404

    deleted = await client.delete(f"/api/v1/me/captions/{mine.id}", headers=headers)
    assert deleted.status_code == 200
    assert content.get_captions_for_user(bootstrapped_store, demo_user.user_id) == []


async def test_ideas(client, login_headers):
    headers = await login_headers(settings.demo_access_code)
    resp = await client.post("/api/v1/me/ideas", headers=headers, json={"ideaText": "Reel idea"})
    assert resp.status_code == 200

    listing = await client.get("/api/v1/me/ideas", headers=headers)
    assert [i["idea_text"] for i in listing.json()["data"]["items"]] == ["Reel idea"]

    blank = await client.post("/api/v1/me/ideas", headers=headers, json={"ideaText": ""})
    assert blank.status_code == 422


async def test_usage_and_histories(client, login_headers, bootstrapped_store, demo_user):
    headers = await login_headers(settings.demo_access_code)
    history.save_story_history(bootstrapped_store, demo_user.user_id, "A story")

    usage = await client.get("/api/v1/me/usage", headers=headers)
    assert usage.json()["data"]["chat"] == {"used": 0, "limit": 10}

    stories = await client.get("/api/v1/me/history/story", headers=headers)
    assert [s["content"] for s in stories.json()["data"]["items"]] == ["A story"]

    chats = await client.get("/api/v1/me/history/chat", headers=headers)
    assert chats.json()["data"]["items"] == []

    bad = await client.get("/api/v1/me/history/video", headers=headers)
    assert bad.status_code == 422
