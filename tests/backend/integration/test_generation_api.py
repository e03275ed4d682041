import pytest

from itembot.config import settings
from itembot.repositories import content, history


pytestmark = pytest.mark.asyncio


async def test_story_stream_and_quota(client, login_headers, bootstrapped_store, demo_user):
    headers = await login_headers(settings.demo_access_code)

    resp = await client.post("/api/v1/generate/story", headers=headers, json={"idea": "cake reel"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == "Story one: do this."
    assert history.get_story_history(bootstrapped_store, demo_user.user_id)[0].content == "Story one: do this."

    again = await client.post("/api/v1/generate/story", headers=headers, json={"idea": "another"})
    assert again.status_code == 429
    assert again.json()["detail"]["code"] == "QUOTA_EXCEEDED"


async def test_story_stream_failure_is_reported_inline(client, login_headers, backend, bootstrapped_store, demo_user):
    headers = await login_headers(settings.demo_access_code)
    backend.fail = True
    backend.fail_after = 1

    resp = await client.post("/api/v1/generate/story", headers=headers, json={"idea": "cake reel"})

    assert resp.status_code == 200
    assert resp.text.startswith("Story ")
    assert "Error while generating the story scenario" in resp.text
    assert history.get_story_history(bootstrapped_store, demo_user.user_id) == []


async def test_caption_consumes_scenario(client, login_headers, bootstrapped_store, demo_user):
    headers = await login_headers(settings.demo_access_code)
    scenario = content.add_scenario_for_user(bootstrapped_store, demo_user.user_id, 3, "Film the oven")

    resp = await client.post(f"/api/v1/generate/captions/{scenario.id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["title"] == "Caption for scenario #3"

    again = await client.post(f"/api/v1/generate/captions/{scenario.id}", headers=headers)
    assert again.status_code == 404


async def test_caption_failure_maps_to_bad_gateway(client, login_headers, backend, bootstrapped_store, demo_user):
    headers = await login_headers(settings.demo_access_code)
    scenario = content.add_scenario_for_user(bootstrapped_store, demo_user.user_id, 1, "x")
    backend.fail = True

    resp = await client.post(f"/api/v1/generate/captions/{scenario.id}", headers=headers)

    assert resp.status_code == 502
    assert resp.json()["detail"]["code"] == "GENERATION_FAILED"
    assert content.get_scenario_by_id(bootstrapped_store, scenario.id) is None


async def test_chat(client, login_headers, backend):
    headers = await login_headers(settings.demo_access_code)
    resp = await client.post("/api/v1/generate/chat", headers=headers, json={"message": "hello"})
    assert resp.status_code == 200
    assert resp.json()["data"]["reply"] == backend.reply

    usage = await client.get("/api/v1/me/usage", headers=headers)
    assert usage.json()["data"]["chat"]["used"] == 1


async def test_image_generate_and_edit(client, login_headers):
    headers = await login_headers(settings.demo_access_code)
    resp = await client.post("/api/v1/generate/image", headers=headers, json={"prompt": "a cake"})
    assert resp.status_code == 200
    assert resp.json()["data"] == {"url": "data:image/png;base64,aW1hZ2U=", "mimeType": "image/png"}

    edit = await client.post("/api/v1/generate/image/edit", headers=headers,
                             json={"prompt": "add candles", "imageData": "c3Jj", "mimeType": "image/jpeg"})
    assert edit.status_code == 200

    images = await client.get("/api/v1/me/history/image", headers=headers)
    assert len(images.json()["data"]["items"]) == 2


async def test_news_cached_per_day(client, login_headers, backend):
    headers = await login_headers(settings.demo_access_code)
    first = await client.get("/api/v1/news", headers=headers)
    assert first.status_code == 200
    assert first.json()["data"]["article"] == backend.news.text

    await client.get("/api/v1/news", headers=headers)
    assert len(backend.calls) == 1

    await client.get("/api/v1/news", headers=headers, params={"refresh": "true"})
    assert len(backend.calls) == 2
