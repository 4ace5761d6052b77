"""Latest Electron release lookup."""
import asyncio
import json
from typing import Any

import aiohttp

from electron_manager.binaries.constants import (
    FALLBACK_TIMEOUT,
    GITHUB_LATEST_RELEASE_URL,
    NPM_REGISTRY_LATEST_URL,
    PRIMARY_TIMEOUT,
)
from electron_manager.errors import NetworkError, ResolutionError
from electron_manager.logging import get_logger

logger = get_logger(__name__)


async def fetch_json(url: str, timeout: float) -> Any:
    """GET a JSON document.

    Transport problems (DNS, refused connection, timeout, non-2xx status)
    raise NetworkError; a body that is not UTF-8 JSON raises ResolutionError.
    """
    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(
                url, timeout=aiohttp.ClientTimeout(total=timeout)
            ) as response:
                response.raise_for_status()
                body = await response.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise NetworkError(url, str(e) or e.__class__.__name__) from e

    try:
        return json.loads(body.decode("utf-8"))
    except ValueError as e:
        raise ResolutionError(url, "json body") from e


def _string_field(body: Any, field: str, url: str) -> str:
    value = body.get(field) if isinstance(body, dict) else None
    if not isinstance(value, str):
        raise ResolutionError(url, field)
    return value


class VersionResolver:
    """Resolves the latest published Electron version.

    The npm registry reflects the real latest release; the GitHub releases
    API is used only when the registry cannot be reached. The GitHub tag is
    returned as-is, so it usually carries a leading "v" the registry version
    does not have.
    """

    def __init__(
        self,
        primary_url: str = NPM_REGISTRY_LATEST_URL,
        fallback_url: str = GITHUB_LATEST_RELEASE_URL,
        primary_timeout: float = PRIMARY_TIMEOUT,
        fallback_timeout: float = FALLBACK_TIMEOUT,
    ):
        self.primary_url = primary_url
        self.fallback_url = fallback_url
        self.primary_timeout = primary_timeout
        self.fallback_timeout = fallback_timeout

    async def latest(self) -> str:
        logger.info("fetching_release_metadata", url=self.primary_url)
        try:
            body = await fetch_json(self.primary_url, self.primary_timeout)
        except NetworkError as e:
            logger.warning(
                "primary_release_source_failed",
                url=self.primary_url,
                error=str(e),
                fallback=self.fallback_url,
            )
            return await self.latest_from_fallback()

        version = _string_field(body, "version", self.primary_url)
        logger.info("latest_release_resolved", version=version, source="primary")
        return version

    async def latest_from_fallback(self) -> str:
        body = await fetch_json(self.fallback_url, self.fallback_timeout)
        version = _string_field(body, "tag_name", self.fallback_url)
        logger.info("latest_release_resolved", version=version, source="fallback")
        return version
