import json
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import aiohttp
import pytest
import pytest_asyncio
from dotenv import load_dotenv

# Settings are read when the package is first imported, so the test
# environment has to be in place before any badge_of_shame import.
load_dotenv(str(Path(__file__).parent / "test.env"), override=True)

from httpx import ASGITransport, AsyncClient  # noqa: E402
from badge_of_shame.main import application  # noqa: E402
from badge_of_shame.routes.badges.repository import MemoryBadgeCache  # noqa: E402
from badge_of_shame.routes.badges.service import BadgeService, get_badge_service  # noqa: E402

REPO_SLUG = "owner/repo"
SUMMARY_URL = f"https://api.travis-ci.org/repos/{REPO_SLUG}"
BUILDS_URL = f"https://api.travis-ci.org/repos/{REPO_SLUG}/builds"
COMMIT_SHA = "abc123"
COMMIT_URL = f"https://github.com/{REPO_SLUG}/commit/{COMMIT_SHA}"
GITHUB_COMMIT_URL = f"https://api.github.com/repos/{REPO_SLUG}/commits/{COMMIT_SHA}"


def summary_payload(build_id: int = 100, state: str = "failed") -> dict:
    return {"repo": {"id": 1, "slug": REPO_SLUG, "last_build_id": build_id, "last_build_state": state}}


def builds_payload() -> dict:
    return {
        "builds": [
            {"id": 100, "state": "failed", "commit_id": 5, "event_type": "push"},
            {"id": 99, "state": "passed", "commit_id": 4, "event_type": "push"},
        ],
        "commits": [
            {"id": 5, "sha": COMMIT_SHA},
            {"id": 4, "sha": "def456"},
        ],
    }


def commit_payload(login: str = "alice") -> dict:
    return {"sha": COMMIT_SHA, "html_url": COMMIT_URL, "author": {"login": login, "id": 42}}


class FakeResponse:
    def __init__(self, status: int, body: bytes) -> None:
        self.status = status
        self.body = body

    async def read(self) -> bytes:
        return self.body

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False


class FakeUpstream:
    """Stands in for aiohttp.ClientSession, answering GETs from a URL table.

    Unknown URLs behave like an unreachable host.
    """

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, Any]] = {}
        self.requests: list[tuple[str, dict[str, str]]] = []

    def add(self, url: str, payload: Any, status: int = 200) -> None:
        self.routes[url] = (status, payload)

    def get(self, url: str, headers: dict[str, str] | None = None) -> FakeResponse:
        self.requests.append((url, headers or {}))
        if url not in self.routes:
            raise aiohttp.ClientConnectionError(f"Cannot connect to {url}")
        status, payload = self.routes[url]
        if isinstance(payload, bytes):
            body = payload
        else:
            body = (payload if isinstance(payload, str) else json.dumps(payload)).encode()
        return FakeResponse(status, body)

    @property
    def requested_urls(self) -> list[str]:
        return [url for url, _ in self.requests]


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def failing_upstream(upstream: FakeUpstream) -> FakeUpstream:
    """Upstream where the last build failed and alice pushed the breaking commit."""
    upstream.add(SUMMARY_URL, summary_payload())
    upstream.add(BUILDS_URL, builds_payload())
    upstream.add(GITHUB_COMMIT_URL, commit_payload())
    return upstream


@pytest.fixture
def cache() -> MemoryBadgeCache:
    return MemoryBadgeCache()


@pytest.fixture
def badge_service(upstream: FakeUpstream, cache: MemoryBadgeCache) -> BadgeService:
    return BadgeService(http_session=upstream, cache=cache)


@pytest_asyncio.fixture
async def client(badge_service: BadgeService) -> AsyncGenerator[AsyncClient, None]:
    # Replace the service that the badge route would build from app.state
    application.dependency_overrides[get_badge_service] = lambda: badge_service
    async with AsyncClient(transport=ASGITransport(app=application), base_url="http://test") as client:
        yield client
    application.dependency_overrides.clear()
