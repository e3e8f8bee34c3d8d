from __future__ import annotations

from typing import Optional

import pytest

from tunei.models.schemas import FeedItem, Sentiment


SAMPLE_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Tech Daily</title>
    <link>https://techdaily.example.com</link>
    <description>Technology news</description>
    <item>
      <title>Chip makers race to build faster processors</title>
      <link>https://techdaily.example.com/chips</link>
      <description><![CDATA[<p>Chip makers &amp; foundries are <b>racing</b> ahead.</p>]]></description>
      <content:encoded><![CDATA[<p>Full story</p><img src="http://x/y.png" alt="chip"/>]]></content:encoded>
      <pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Open source tooling keeps growing</title>
      <link>https://techdaily.example.com/oss</link>
      <description>Maintainers report record contributions this year.</description>
      <pubDate>Sun, 31 Dec 2023 08:30:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""


@pytest.fixture
def rss_document() -> str:
    return SAMPLE_RSS


@pytest.fixture
def make_item():
    counter = {"n": 0}

    def _make_item(
        title: str = "Headline",
        description: str = "Some description text",
        source: str = "Example News",
        publish_date: str = "2024-01-01T00:00:00+00:00",
        sentiment: Optional[Sentiment] = Sentiment.NEUTRAL,
        content: str = "",
        item_id: Optional[str] = None,
    ) -> FeedItem:
        counter["n"] += 1
        return FeedItem(
            id=item_id or f"item-{counter['n']}",
            title=title,
            description=description,
            content=content or description,
            link=f"https://example.com/{counter['n']}",
            source=source,
            source_url="https://example.com",
            publish_date=publish_date,
            sentiment=sentiment,
        )

    return _make_item
