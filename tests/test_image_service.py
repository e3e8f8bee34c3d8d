from __future__ import annotations

import pytest

from tunei.core.config import Settings
from tunei.core.notifications import NoticeCollector
from tunei.models.schemas import NoticeLevel
from tunei.services.image_service import ImageService


def _service(monkeypatch, pexels=None, serpapi=None) -> ImageService:
    for name, value in (("PEXELS_API_KEY", pexels), ("SERPAPI_API_KEY", serpapi)):
        if value is None:
            monkeypatch.delenv(name, raising=False)
        else:
            monkeypatch.setenv(name, value)
    return ImageService(Settings())


def test_parse_pexels_uses_alt_text_or_query():
    data = {
        "photos": [
            {"src": {"large": "https://img/1.jpg"}, "alt": "City skyline", "width": 800, "height": 600},
            {"src": {"large": "https://img/2.jpg"}, "alt": ""},
            {"src": {}},
        ]
    }

    results = ImageService.parse_pexels(data, "nairobi")

    assert [(r.url, r.title, r.source) for r in results] == [
        ("https://img/1.jpg", "City skyline", "Pexels"),
        ("https://img/2.jpg", "nairobi", "Pexels"),
    ]
    assert results[0].width == 800


def test_parse_serpapi_skips_results_without_original():
    data = {
        "images_results": [
            {"original": "https://img/a.png", "title": "A", "original_width": 10, "original_height": 20},
            {"thumbnail": "https://img/b-thumb.png"},
        ]
    }

    results = ImageService.parse_serpapi(data)

    assert len(results) == 1
    assert results[0].source == "SerpAPI"
    assert results[0].height == 20


@pytest.mark.asyncio
async def test_no_configured_provider_returns_empty(monkeypatch):
    service = _service(monkeypatch)

    assert await service.search_images("kenya", NoticeCollector()) == []
    assert await service.search_images("   ", NoticeCollector()) == []


@pytest.mark.asyncio
async def test_pexels_failure_falls_back_to_serpapi(monkeypatch):
    service = _service(monkeypatch, pexels="p-key", serpapi="s-key")

    async def pexels_down(session, query):
        return None

    async def serpapi_ok(session, query):
        return ImageService.parse_serpapi({"images_results": [{"original": "https://img/s.png"}]})

    monkeypatch.setattr(service, "_search_pexels", pexels_down)
    monkeypatch.setattr(service, "_search_serpapi", serpapi_ok)
    try:
        results = await service.search_images("kenya")
    finally:
        await service.close()

    assert [r.url for r in results] == ["https://img/s.png"]


@pytest.mark.asyncio
async def test_provider_error_emits_notice_and_returns_empty(monkeypatch):
    service = _service(monkeypatch, pexels="p-key")

    async def exploding(session, query):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(service, "_search_pexels", exploding)
    notices = NoticeCollector()
    try:
        results = await service.search_images("kenya", notices)
    finally:
        await service.close()

    assert results == []
    assert notices.notices[0].level == NoticeLevel.ERROR
