from __future__ import annotations

from tunei.models.schemas import Sentiment
from tunei.services.analytics_service import (
    DEFAULT_PALETTE,
    AnalyticsPalette,
    compute_analytics,
    extract_keywords,
)


def test_empty_input_gives_zeroed_analytics():
    analytics = compute_analytics([])

    assert analytics.word_count == 0
    assert analytics.sources_count == 0
    assert analytics.article_count == 0
    assert [(s.name, s.value) for s in analytics.sentiment_data] == [
        ("Positive", 0),
        ("Neutral", 0),
        ("Negative", 0),
    ]
    assert analytics.source_data == []
    assert analytics.top_keywords == []


def test_sentiment_buckets_count_missing_labels_as_neutral(make_item):
    items = [
        make_item(sentiment=Sentiment.POSITIVE),
        make_item(sentiment=Sentiment.POSITIVE),
        make_item(sentiment=Sentiment.NEGATIVE),
        make_item(sentiment=None),
    ]

    analytics = compute_analytics(items)

    assert {s.name: s.value for s in analytics.sentiment_data} == {"Positive": 2, "Neutral": 1, "Negative": 1}
    assert sum(s.value for s in analytics.sentiment_data) == analytics.article_count
    assert analytics.sentiment_data[0].color == "#4ade80"


def test_all_positive_items(make_item):
    items = [make_item(sentiment=Sentiment.POSITIVE) for _ in range(3)]

    analytics = compute_analytics(items)

    assert analytics.sentiment_data[0].value == 3
    assert analytics.sentiment_data[1].value == 0
    assert analytics.sentiment_data[2].value == 0


def test_empty_description_counts_no_words(make_item):
    analytics = compute_analytics([make_item(description=""), make_item(description="two words")])

    assert analytics.word_count == 2


def test_source_distribution_keeps_top_five_with_colors(make_item):
    counts = {"BBC News": 4, "CNN": 3, "Local Gazette": 3, "Daily Planet": 2, "Reuters": 1, "Tiny Blog": 1}
    items = [make_item(source=name) for name, n in counts.items() for _ in range(n)]

    analytics = compute_analytics(items)

    assert analytics.sources_count == 6
    assert [(s.name, s.articles) for s in analytics.source_data] == [
        ("BBC News", 4),
        ("CNN", 3),
        ("Local Gazette", 3),
        ("Daily Planet", 2),
        ("Reuters", 1),
    ]
    colors = {s.name: s.color for s in analytics.source_data}
    assert colors["BBC News"] == "#bb1919"
    assert colors["CNN"] == "#cc0000"
    assert colors["Local Gazette"] == DEFAULT_PALETTE.default_colors[2]
    assert colors["Daily Planet"] == DEFAULT_PALETTE.default_colors[3]


def test_palette_default_colors_cycle():
    palette = AnalyticsPalette(source_colors={}, default_colors=("#111111", "#222222"))

    assert palette.source_color("anything", 0) == "#111111"
    assert palette.source_color("anything", 1) == "#222222"
    assert palette.source_color("anything", 2) == "#111111"


def test_injected_palette_is_used(make_item):
    palette = AnalyticsPalette(
        source_colors={"Example News": "#abcdef"},
        sentiment_colors={"Positive": "green", "Neutral": "grey", "Negative": "red"},
    )

    analytics = compute_analytics([make_item()], palette)

    assert analytics.source_data[0].color == "#abcdef"
    assert [s.color for s in analytics.sentiment_data] == ["green", "grey", "red"]


def test_keywords_skip_stopwords_and_short_tokens(make_item):
    items = [
        make_item(title="Solar power expands", description="The solar farm and the wind farm"),
        make_item(title="Solar subsidies", description="Wind and sun are cheap"),
    ]

    keywords = extract_keywords(items)
    words = [word for word, _ in keywords]

    assert keywords[0] == ("solar", 3)
    assert ("farm", 2) in keywords
    assert ("wind", 2) in keywords
    assert "the" not in words
    assert "and" not in words
    assert "sun" not in words
    assert all(len(word) > 3 for word in words)


def test_keywords_are_limited_to_ten(make_item):
    description = " ".join(f"keyword{n}" for n in range(20))

    analytics = compute_analytics([make_item(title="", description=description)])

    assert len(analytics.top_keywords) == 10
    assert analytics.top_keywords[0].text == "keyword0"


def test_analytics_serializes_with_camel_case(make_item):
    data = compute_analytics([make_item()]).model_dump(by_alias=True)

    assert {"wordCount", "sourcesCount", "articleCount", "sentimentData", "sourceData", "topKeywords"} <= set(data)


def test_there_is_counted_as_a_keyword(make_item):
    keywords = dict(extract_keywords([make_item(title="There and there", description="")]))

    assert keywords["there"] == 2
