"""Feed discovery endpoint for the Feedwatch API."""

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from slowapi import Limiter
from slowapi.util import get_remote_address

from feedwatch.api.dependencies import get_http_client
from feedwatch.feeds.discovery import discover

router = APIRouter(prefix="/api/discover", tags=["discover"])
limiter = Limiter(key_func=get_remote_address)


class DiscoverRequest(BaseModel):
    url: str = Field(min_length=1, max_length=2048)


@router.post("")
@limiter.limit("30/minute")
async def discover_feed(
    request: Request,
    body: DiscoverRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Resolve a page or feed URL to a feed without subscribing.

    Discovery makes up to eight outbound requests, hence the rate limit.

    Returns:
        feed_url, site_url and title of the discovered feed

    Raises:
        HTTPException: 422 if no feed could be found
    """
    found = await discover(body.url.strip(), client)
    if found is None:
        raise HTTPException(status_code=422, detail="No feed found at this URL")
    return found.model_dump()
