import asyncio
import json
import logging
from typing import Any

import aiohttp
from badge_of_shame.settings import settings
from badge_of_shame.utils.errors import InvalidJSONError, UpstreamStatusError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


def request_timeout() -> aiohttp.ClientTimeout:
    return aiohttp.ClientTimeout(total=settings.HTTP_TIMEOUT_SECONDS)


async def fetch_json(session: aiohttp.ClientSession, url: str, headers: dict[str, str], request_name: str) -> Any:
    """GET a JSON document, raising a BadgeError subclass for anything but a decodable 200."""
    logger.debug(f"{request_name}: GET {url}")
    try:
        async with session.get(url, headers=headers) as response:
            if response.status != 200:
                raise UpstreamStatusError(request_name, response.status, url)
            body = await response.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise UpstreamUnavailableError(request_name, exc) from exc

    # json.loads detects the UTF encoding of raw bytes; bad byte sequences raise UnicodeDecodeError
    try:
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidJSONError(request_name) from exc
