"""Badge resolution.

``BadgeService.resolve`` walks a strictly linear sequence of steps for one
repository slug:

    fetch build summary -> cache hit? -> fetch build list -> find failing
    commit -> fetch commit author -> cache and render

Each step raises a ``BadgeError`` on failure. The service catches it once,
logs the reason and answers with the empty badge, so callers always receive an
SVG document.
"""

import logging

import aiohttp
from fastapi import Request
from badge_of_shame.routes.badges.repository import BadgeCache, cache_key
from badge_of_shame.routes.badges.schema import PASSED_STATE, PUSH_EVENT, Build, CacheEntry, Commit
from badge_of_shame.utils.errors import BadgeError, CommitNotFoundError
from badge_of_shame.utils.github_commits import get_commit_author
from badge_of_shame.utils.svg import EMPTY_BADGE, render_badge
from badge_of_shame.utils.travis import get_build_list, get_build_summary

logger = logging.getLogger(__name__)


def find_failing_commit_id(builds: list[Build]) -> int:
    """Return the commit id of the oldest push build since the last passing build.

    Builds arrive newest first. Scanning stops at the first passing build;
    only push-triggered builds replace the candidate, so pull request builds
    never decide who gets blamed.
    """
    commit_id = None
    for build in builds:
        if build.state == PASSED_STATE:
            break
        if build.event_type == PUSH_EVENT:
            commit_id = build.commit_id

    if commit_id is None:
        raise CommitNotFoundError("No commit ID")
    return commit_id


def find_commit_sha(commits: list[Commit], commit_id: int) -> str:
    for commit in commits:
        if commit.id == commit_id:
            return commit.sha
    raise CommitNotFoundError("No commit SHA")


def get_badge_service(request: Request) -> "BadgeService":
    return BadgeService(http_session=request.app.state.http_session, cache=request.app.state.badge_cache)


class BadgeService:
    def __init__(self, http_session: aiohttp.ClientSession, cache: BadgeCache) -> None:
        self.http_session = http_session
        self.cache = cache

    async def resolve(self, repo_slug: str) -> str:
        """Return the SVG document to serve for repo_slug."""
        try:
            return await self._resolve(repo_slug)
        except BadgeError as exc:
            logger.warning(f"Serving empty badge for {repo_slug}: {exc}")
            return EMPTY_BADGE

    async def _resolve(self, repo_slug: str) -> str:
        key = cache_key(repo_slug)
        summary = await get_build_summary(self.http_session, repo_slug)

        cached = await self.cache.get(key)
        if cached is not None and cached.last_build_id == summary.last_build_id:
            logger.debug(f"Cache hit for {repo_slug} at build {summary.last_build_id}")
            if cached.last_build_success:
                return EMPTY_BADGE
            return render_badge(cached.last_login, cached.last_url)

        if summary.is_success:
            await self.cache.set(key, CacheEntry(last_build_id=summary.last_build_id, last_build_success=True))
            logger.info(f"Build {summary.last_build_id} of {repo_slug} passed")
            return EMPTY_BADGE

        build_list = await get_build_list(self.http_session, repo_slug)
        commit_id = find_failing_commit_id(build_list.builds)
        commit_sha = find_commit_sha(build_list.commits, commit_id)
        author = await get_commit_author(self.http_session, repo_slug, commit_sha)

        await self.cache.set(
            key,
            CacheEntry(
                last_build_id=summary.last_build_id,
                last_build_success=False,
                last_login=author.login,
                last_url=author.html_url,
            ),
        )
        logger.info(f"Build {summary.last_build_id} of {repo_slug} failed, blaming {author.login} ({commit_sha})")
        return render_badge(author.login, author.html_url)
