# ============================================================================
# FILE: app/core/tmdb_client.py
# TMDB read-only metadata client (trending, search, details, seasons)
# Responses are cached in Redis to save API quota
# ============================================================================
from typing import Any, Dict, Optional
import httpx
import logging
from app.config import settings
from app.core.cache import RedisCache
from app.core.errors import NotFoundError, UpstreamError

logger = logging.getLogger(__name__)


class TMDBClient:
    """
    Thin async wrapper over the TMDB v3 REST API.
    JSON is passed through untouched; pagination is TMDB's own.
    """

    def __init__(
        self,
        api_key: str = None,
        base_url: str = None,
        cache: Optional[RedisCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.TMDB_API_KEY
        self.base_url = (base_url or settings.TMDB_BASE_URL).rstrip("/")
        self.cache = cache
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=settings.TMDB_TIMEOUT_SECONDS,
            transport=transport,
        )

        if not self.api_key:
            logger.warning("TMDB API key not configured")

    async def close(self) -> None:
        await self.client.aclose()

    async def _get(self, path: str, params: Dict[str, Any] = None) -> Dict[str, Any]:
        if not self.api_key:
            raise UpstreamError()

        query = {k: v for k, v in (params or {}).items() if v is not None}
        cache_key = "tmdb:" + path + ":" + "&".join(f"{k}={query[k]}" for k in sorted(query))

        if self.cache is not None:
            cached = await self.cache.get_cache(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit: {cache_key}")
                return cached

        try:
            response = await self.client.get(path, params={**query, "api_key": self.api_key})
        except httpx.HTTPError as e:
            logger.error(f"TMDB request failed for {path}: {e}")
            raise UpstreamError() from e

        if response.status_code == 404:
            raise NotFoundError("Title not found")
        if response.status_code >= 400:
            logger.error(f"TMDB returned {response.status_code} for {path}")
            raise UpstreamError()

        data = response.json()
        if self.cache is not None:
            await self.cache.set_cache(cache_key, data, expire=settings.CACHE_EXPIRE_SECONDS)
        return data

    async def trending(self, time_window: str = "week") -> Dict[str, Any]:
        return await self._get(f"/trending/all/{time_window}")

    async def popular(self, media_type: str, page: int = 1) -> Dict[str, Any]:
        return await self._get(f"/{media_type}/popular", {"page": page})

    async def top_rated(self, media_type: str, page: int = 1) -> Dict[str, Any]:
        return await self._get(f"/{media_type}/top_rated", {"page": page})

    async def search(self, query: str, page: int = 1) -> Dict[str, Any]:
        return await self._get("/search/multi", {"query": query, "page": page})

    async def details(self, media_type: str, tmdb_id: int) -> Dict[str, Any]:
        return await self._get(f"/{media_type}/{tmdb_id}", {"append_to_response": "credits,videos"})

    async def season(self, tmdb_id: int, season_number: int) -> Dict[str, Any]:
        return await self._get(f"/tv/{tmdb_id}/season/{season_number}")
