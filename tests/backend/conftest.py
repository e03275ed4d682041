import datetime as dt
from typing import AsyncIterator, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from itembot.api.v1.deps import get_backend_dep, get_store_dep
from itembot.config import settings
from itembot.core.bootstrap import initialize_db
from itembot.core.db import Store
from itembot.core.storage import MemoryStorage
from itembot.main import app
from itembot.models import ChatMessage
from itembot.services.ai_base import GenerationBackend, GenerationError, ImagePayload, NewsResult


class FakeClock:
    """
    Controllable clock for Store.

    Starts at a fixed aware UTC instant and only moves when told to.
    """

    def __init__(self, start: Optional[dt.datetime] = None):
        self.current = start or dt.datetime(2024, 3, 10, 12, 0, 0, tzinfo=dt.timezone.utc)

    def __call__(self) -> dt.datetime:
        return self.current

    def advance(self, **kwargs) -> dt.datetime:
        self.current = self.current + dt.timedelta(**kwargs)
        return self.current


class FakeBackend(GenerationBackend):
    """
    In-process generation backend.

    Records every call; set `fail` to make the next calls raise GenerationError
    (`fail_after` chunks into a stream for mid-stream failures).
    """

    def __init__(self):
        self.story_chunks: List[str] = ["Story ", "one: ", "do this."]
        self.reply = "Hello from Item!"
        self.image = ImagePayload(data="aW1hZ2U=", mime_type="image/png")
        self.news = NewsResult(text="<b>Reels reach</b> is up.", sources=[{"uri": "https://example.com/a", "title": "A"}])
        self.fail = False
        self.fail_after: Optional[int] = None
        self.calls: List[tuple] = []

    async def generate_text(self, prompt: str, system_instruction: Optional[str] = None) -> str:
        self.calls.append(("generate_text", prompt))
        if self.fail:
            raise GenerationError("backend down")
        return "".join(self.story_chunks)

    async def stream_text(self, prompt: str) -> AsyncIterator[str]:
        self.calls.append(("stream_text", prompt))
        if self.fail and self.fail_after is None:
            raise GenerationError("backend down")
        for i, chunk in enumerate(self.story_chunks):
            if self.fail_after is not None and i >= self.fail_after:
                raise GenerationError("stream interrupted")
            yield chunk

    async def chat(self, history: List[ChatMessage], message: str, system_instruction: Optional[str] = None) -> str:
        self.calls.append(("chat", message, len(history)))
        if self.fail:
            raise GenerationError("backend down")
        return self.reply

    async def generate_image(self, prompt: str) -> ImagePayload:
        self.calls.append(("generate_image", prompt))
        if self.fail:
            raise GenerationError("backend down")
        return self.image

    async def edit_image(self, prompt: str, image: ImagePayload) -> ImagePayload:
        self.calls.append(("edit_image", prompt, image.mime_type))
        if self.fail:
            raise GenerationError("backend down")
        return self.image

    async def search_news(self, prompt: str) -> NewsResult:
        self.calls.append(("search_news", prompt))
        if self.fail:
            raise GenerationError("backend down")
        return self.news

    def is_available(self) -> bool:
        return True

    @property
    def name(self) -> str:
        return "Fake"


@pytest.fixture
def storage():
    """Fresh in-memory medium."""
    return MemoryStorage()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(storage, clock):
    """Store over an empty in-memory medium with a controllable clock."""
    return Store(storage, key="test_db", clock=clock, timezone="UTC")


@pytest.fixture
def bootstrapped_store(store):
    """Store that already holds the reserved admin and demo accounts."""
    initialize_db(store)
    return store


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def admin_id():
    return settings.admin_user_id


@pytest.fixture
def demo_user(bootstrapped_store):
    """The bootstrapped demo user record."""
    state = bootstrapped_store.load()
    return next(u for u in state.users if u.access_code == settings.demo_access_code)


@pytest_asyncio.fixture
async def client(bootstrapped_store, backend):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh store
    and a fake generation backend.
    """
    app.dependency_overrides[get_store_dep] = lambda: bootstrapped_store
    app.dependency_overrides[get_backend_dep] = lambda: backend
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def login_headers(client):
    """
    Helper fixture to obtain session headers via the login endpoint.
    """

    async def _get_headers(access_code: str) -> dict[str, str]:
        resp = await client.post("/api/v1/auth/login", json={"accessCode": access_code})
        assert resp.status_code == 200, resp.text
        return {"X-User-Id": resp.json()["data"]["sessionId"]}

    return _get_headers
