"""Health check endpoints for the Feedwatch API."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from redis.asyncio import Redis
from redis.exceptions import RedisError

from feedwatch.api.dependencies import get_redis

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def health_check():
    """Liveness: the process is up and serving requests."""
    return {"ok": True}


@router.get("/readyz")
async def readiness_check(redis: Redis = Depends(get_redis)):
    """
    Readiness: the feed store can be reached.

    Every feed endpoint and the poll scheduler read and write the feed list
    in Redis, so the service is not ready while Redis does not answer.

    Raises:
        HTTPException: 503 if Redis does not answer a PING
    """
    try:
        await redis.ping()
    except (RedisError, OSError):
        logger.warning("Readiness check failed: Redis unavailable", exc_info=True)
        raise HTTPException(status_code=503, detail="Feed store unavailable")
    return {"ok": True, "redis": True}
