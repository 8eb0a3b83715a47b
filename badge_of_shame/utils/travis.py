"""Travis CI v2 API calls."""

import aiohttp
from pydantic import ValidationError
from badge_of_shame.routes.badges.schema import BuildList, BuildSummary
from badge_of_shame.settings import settings
from badge_of_shame.utils.errors import MissingDataError
from badge_of_shame.utils.http import fetch_json

TRAVIS_ACCEPT = "application/vnd.travis-ci.2+json"


def travis_headers() -> dict[str, str]:
    return {"User-Agent": settings.USER_AGENT, "Accept": TRAVIS_ACCEPT}


async def get_build_summary(session: aiohttp.ClientSession, repo_slug: str) -> BuildSummary:
    """Fetch the repository summary holding the last build id and state."""
    url = f"{settings.TRAVIS_API_URL}/repos/{repo_slug}"
    payload = await fetch_json(session, url, travis_headers(), "Travis API request #1")
    try:
        return BuildSummary.model_validate(payload)
    except ValidationError as exc:
        raise MissingDataError("Travis API response #1") from exc


async def get_build_list(session: aiohttp.ClientSession, repo_slug: str) -> BuildList:
    """Fetch recent builds (newest first) along with the commits they reference."""
    url = f"{settings.TRAVIS_API_URL}/repos/{repo_slug}/builds"
    payload = await fetch_json(session, url, travis_headers(), "Travis API request #2")
    try:
        return BuildList.model_validate(payload)
    except ValidationError as exc:
        raise MissingDataError("Travis API response #2") from exc
