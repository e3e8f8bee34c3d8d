from __future__ import annotations

import asyncio

import pytest
import aiohttp
from aiohttp import test_utils, web

from tunei.core.llm_config import LLMConfig
from tunei.core.notifications import NoticeCollector
from tunei.services.feed_fetcher import (
    BROWSER_USER_AGENT,
    DirectTransport,
    FeedFetcher,
    FeedSettings,
    FeedTransportError,
    RelayTransport,
)
from tunei.services.llm_service import LLMService, LLMServiceError

FEED_URL = "https://wire.example.com/rss"

RELAYED_FEED = """<?xml version="1.0"?>
<rss version="2.0">
  <channel>
    <title>X</title>
    <link>https://x.example.com</link>
    <item><title>Relayed story</title><description>Delivered by the good relay.</description></item>
  </channel>
</rss>
"""


async def _start(app: web.Application) -> test_utils.TestServer:
    server = test_utils.TestServer(app)
    await server.start_server()
    return server


def _relay_app(seen: list) -> web.Application:
    async def bad(request):
        seen.append(("bad", request.query.get("url")))
        return web.Response(status=503, text="relay unavailable")

    async def slow(request):
        seen.append(("slow", request.query.get("url")))
        await asyncio.sleep(1.5)
        return web.Response(text=RELAYED_FEED)

    async def good(request):
        seen.append(("good", request.query.get("url"), request.headers.get("User-Agent")))
        return web.Response(text=RELAYED_FEED, content_type="application/rss+xml")

    app = web.Application()
    app.router.add_get("/bad", bad)
    app.router.add_get("/slow", slow)
    app.router.add_get("/good", good)
    return app


@pytest.mark.asyncio
async def test_relays_skip_error_status_and_timeout():
    seen: list = []
    server = await _start(_relay_app(seen))
    transports = [RelayTransport(f"{server.make_url(path)}?url=") for path in ("/bad", "/slow", "/good")]
    fetcher = FeedFetcher(FeedSettings(feeds=[FEED_URL], timeout_seconds=0.3), transports)
    notices = NoticeCollector()
    try:
        items = await fetcher.fetch_all(notices)
    finally:
        await fetcher.close()
        await server.close()

    assert [item.id for item in items] == ["x-0"]
    assert items[0].description == "Delivered by the good relay."
    assert [entry[0] for entry in seen] == ["bad", "slow", "good"]
    assert all(entry[1] == FEED_URL for entry in seen)
    assert seen[-1][2] == BROWSER_USER_AGENT
    assert notices.notices == []


@pytest.mark.asyncio
async def test_transport_errors_are_wrapped():
    server = await _start(_relay_app([]))
    session = aiohttp.ClientSession()
    try:
        with pytest.raises(FeedTransportError, match="HTTP 503"):
            await DirectTransport().fetch(session, str(server.make_url("/bad")), 1)
        with pytest.raises(FeedTransportError, match="timed out"):
            await DirectTransport().fetch(session, str(server.make_url("/slow")), 0.2)
        assert "Relayed story" in await DirectTransport().fetch(session, str(server.make_url("/good")), 1)
    finally:
        await session.close()
        await server.close()


def _completion_app(calls: list) -> web.Application:
    async def completions(request):
        deployment = request.match_info["deployment"]
        calls.append(
            {
                "deployment": deployment,
                "api_key": request.headers.get("api-key"),
                "api_version": request.query.get("api-version"),
                "payload": await request.json(),
            }
        )
        if deployment == "down":
            return web.Response(status=503, text="service unavailable")
        if deployment == "garbled":
            return web.Response(text="<html>gateway error</html>")
        if deployment == "slow":
            await asyncio.sleep(1.5)
        return web.json_response({"choices": [{"message": {"content": "Headline\n\nBody paragraph."}}]})

    app = web.Application()
    app.router.add_post("/openai/deployments/{deployment}/chat/completions", completions)
    return app


def _llm(server: test_utils.TestServer, deployment: str, timeout: float = 2.0) -> LLMService:
    return LLMService(
        config=LLMConfig(
            provider="azure_openai",
            deployment=deployment,
            api_key="test-key",
            endpoint=str(server.make_url("/")),
            api_version="2024-12-01-preview",
            timeout_seconds=timeout,
        )
    )


@pytest.mark.asyncio
async def test_generate_article_posts_credentials_and_sampling_settings():
    calls: list = []
    server = await _start(_completion_app(calls))
    service = _llm(server, "ok")
    try:
        article = await service.generate_article([{"title": "Story", "source": "CNN"}])
    finally:
        await service.close()
        await server.close()

    assert article == "Headline\n\nBody paragraph."
    call = calls[0]
    assert call["api_key"] == "test-key"
    assert call["api_version"] == "2024-12-01-preview"
    payload = call["payload"]
    assert payload["temperature"] == 0.7
    assert payload["top_p"] == 0.95
    assert payload["max_tokens"] == 1000
    assert [message["role"] for message in payload["messages"]] == ["system", "user"]
    assert '"source": "CNN"' in payload["messages"][1]["content"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("deployment", "timeout", "message"),
    [
        ("down", 2.0, "LLM error 503"),
        ("garbled", 2.0, "no completion content|Malformed LLM response"),
        ("slow", 0.2, "timed out"),
    ],
)
async def test_collaborator_failures_raise_service_error(deployment, timeout, message):
    server = await _start(_completion_app([]))
    service = _llm(server, deployment, timeout)
    try:
        with pytest.raises(LLMServiceError, match=message):
            await service.generate_article([{"title": "Story"}])
    finally:
        await service.close()
        await server.close()
