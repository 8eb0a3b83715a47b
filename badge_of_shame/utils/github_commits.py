import aiohttp
from pydantic import ValidationError
from badge_of_shame.routes.badges.schema import Author
from badge_of_shame.settings import settings
from badge_of_shame.utils.errors import MissingDataError
from badge_of_shame.utils.http import fetch_json


def github_headers() -> dict[str, str]:
    headers = {"User-Agent": settings.USER_AGENT, "Accept": "application/json"}
    if settings.GITHUB_TOKEN:
        headers["Authorization"] = f"Bearer {settings.GITHUB_TOKEN}"
    return headers


async def get_commit_author(session: aiohttp.ClientSession, repo_slug: str, commit_sha: str) -> Author:
    """Get the author login and commit page URL for a commit SHA."""
    url = f"{settings.GITHUB_API_URL}/repos/{repo_slug}/commits/{commit_sha}"
    payload = await fetch_json(session, url, github_headers(), "Github API request")
    try:
        return Author.model_validate(payload)
    except ValidationError as exc:
        raise MissingDataError("Github API response") from exc
