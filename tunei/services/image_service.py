import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import aiohttp

from ..core.config import Settings, settings as default_settings
from ..core.notifications import LoggingNotifier, Notifier
from ..models.schemas import ImageResult, NoticeLevel

logger = logging.getLogger(__name__)

PEXELS_SEARCH_URL = "https://api.pexels.com/v1/search"
SERPAPI_SEARCH_URL = "https://serpapi.com/search.json"


class ImageService:
    """
    Image search against Pexels, falling back to SerpAPI image results.

    A provider is only queried when its API key is configured.  Errors never
    reach the caller: they are logged and an empty list is returned.
    """

    def __init__(self, settings: Optional[Settings] = None, timeout_seconds: float = 10.0):
        settings = settings or default_settings
        self.pexels_api_key = settings.PEXELS_API_KEY
        self.serpapi_api_key = settings.SERPAPI_API_KEY
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(timeout=self.timeout)
        return self.session

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()

    @staticmethod
    def parse_pexels(data: Dict[str, Any], query: str) -> List[ImageResult]:
        return [
            ImageResult(
                url=photo["src"]["large"],
                title=photo.get("alt") or query,
                source="Pexels",
                width=photo.get("width"),
                height=photo.get("height"),
            )
            for photo in data.get("photos", [])
            if photo.get("src", {}).get("large")
        ]

    @staticmethod
    def parse_serpapi(data: Dict[str, Any]) -> List[ImageResult]:
        return [
            ImageResult(
                url=image["original"],
                title=image.get("title") or "",
                source="SerpAPI",
                width=image.get("original_width"),
                height=image.get("original_height"),
            )
            for image in data.get("images_results", [])
            if image.get("original")
        ]

    async def _search_pexels(self, session: aiohttp.ClientSession, query: str) -> Optional[List[ImageResult]]:
        url = f"{PEXELS_SEARCH_URL}?query={quote(query)}&per_page=10"
        async with session.get(url, headers={"Authorization": self.pexels_api_key}) as resp:
            if resp.status != 200:
                logger.warning(f"Pexels search responded with status {resp.status}")
                return None
            return self.parse_pexels(await resp.json(), query)

    async def _search_serpapi(self, session: aiohttp.ClientSession, query: str) -> Optional[List[ImageResult]]:
        url = f"{SERPAPI_SEARCH_URL}?q={quote(query)}&tbm=isch&api_key={self.serpapi_api_key}"
        async with session.get(url) as resp:
            if resp.status != 200:
                logger.warning(f"SerpAPI search responded with status {resp.status}")
                return None
            return self.parse_serpapi(await resp.json())

    async def search_images(self, query: str, notifier: Optional[Notifier] = None) -> List[ImageResult]:
        notifier = notifier or LoggingNotifier()
        if not query or not query.strip():
            return []
        if not self.pexels_api_key and not self.serpapi_api_key:
            logger.info("No image search provider is configured")
            return []
        try:
            session = await self._get_session()
            if self.pexels_api_key:
                results = await self._search_pexels(session, query)
                if results is not None:
                    return results
            if self.serpapi_api_key:
                results = await self._search_serpapi(session, query)
                if results is not None:
                    return results
            return []
        except Exception as e:
            logger.error(f"Error searching images: {e}")
            notifier.notify(NoticeLevel.ERROR, "Failed to search images. Please try again.")
            return []


# Global image service instance
image_service = ImageService()
