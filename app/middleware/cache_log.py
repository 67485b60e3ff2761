import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)


class CacheHeaderLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        hit = response.headers.get("X-Cache")
        if hit:
            freshness = response.headers.get("X-Data-Freshness")
            logger.info("[CACHE] %s %s freshness=%s", request.url.path, hit, freshness)
            if freshness == "fallback":
                logger.warning("[CACHE] %s served fallback data", request.url.path)
        return response
