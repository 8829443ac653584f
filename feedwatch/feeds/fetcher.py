"""HTTP retrieval of feed documents."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from feedwatch.config import get_settings

from .errors import InvalidDocument, NetworkFailure
from .models import ParsedFeed
from .parser import parse_document

logger = logging.getLogger(__name__)


def make_client() -> httpx.AsyncClient:
    """Create an async HTTP client configured from settings."""
    settings = get_settings()
    return httpx.AsyncClient(
        timeout=settings.http_timeout_seconds,
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    )


@asynccontextmanager
async def client_scope(
    client: httpx.AsyncClient | None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the given client, or a temporary one that is closed afterwards."""
    if client is not None:
        yield client
        return
    async with make_client() as owned:
        yield owned


async def get(client: httpx.AsyncClient, url: str) -> httpx.Response:
    """
    GET a URL exactly once.

    Raises:
        NetworkFailure: On transport errors, invalid URLs or non-2xx status
    """
    try:
        response = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise NetworkFailure(url, f"{type(exc).__name__}: {exc}") from exc
    if not response.is_success:
        raise NetworkFailure(url, f"HTTP {response.status_code}")
    return response


async def fetch_and_parse(
    url: str, client: httpx.AsyncClient | None = None
) -> ParsedFeed | None:
    """
    Fetch a feed URL and normalize the document.

    Args:
        url: Feed document URL
        client: HTTP client to use; a temporary one is created when omitted

    Returns:
        The parsed feed, or None on network failure, non-success status or
        an invalid document
    """
    async with client_scope(client) as http:
        try:
            response = await get(http, url)
            # Raw bytes so the XML declaration decides the encoding
            return parse_document(response.content)
        except (NetworkFailure, InvalidDocument) as exc:
            logger.debug("Feed fetch failed for %s: %s", url, exc)
            return None
        except Exception:
            logger.debug("Unexpected error fetching feed %s", url, exc_info=True)
            return None
