"""
Result-set analytics.

``compute_analytics`` derives the numbers shown next to a search result:
word and source counts, the sentiment mix, the five busiest sources and
the ten most frequent keywords.  It is pure; display colors come from an
``AnalyticsPalette`` so callers can swap palettes without touching module
state.
"""
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from ..models.schemas import AnalyticsData, FeedItem, Keyword, Sentiment, SentimentSlice, SourceSlice

TOP_SOURCES = 5
TOP_KEYWORDS = 10
MIN_KEYWORD_LENGTH = 4

_WORD_RE = re.compile(r"\b\w+\b")

STOPWORDS: FrozenSet[str] = frozenset({
    "the", "a", "an", "and", "or", "but", "of", "to", "in", "on", "at", "for", "with", "by",
    "about", "as", "into", "like", "through", "after", "over", "between", "out", "from", "up",
    "is", "are", "was", "were", "be", "been", "being", "have", "has", "had", "do", "does", "did",
    "will", "would", "shall", "should", "may", "might", "must", "can", "could", "that", "this",
    "these", "those", "it", "its", "they", "them", "their", "what", "which", "who", "whom",
    "whose", "where", "when", "why", "how",
})


@dataclass(frozen=True)
class AnalyticsPalette:
    source_colors: Dict[str, str] = field(default_factory=lambda: {
        "BBC News": "#bb1919",
        "BBC": "#bb1919",
        "CNN": "#cc0000",
        "Reuters": "#ff8000",
        "TechCrunch": "#0a9e01",
        "ScienceDaily": "#006699",
        "The Guardian": "#052962",
        "Financial Times": "#fff1e5",
        "New York Times": "#000000",
    })
    default_colors: Tuple[str, ...] = (
        "#38bdf8", "#fb923c", "#a78bfa", "#4ade80",
        "#f87171", "#facc15", "#c084fc", "#34d399",
    )
    sentiment_colors: Dict[str, str] = field(default_factory=lambda: {
        "Positive": "#4ade80",
        "Neutral": "#94a3b8",
        "Negative": "#f87171",
    })

    def source_color(self, name: str, rank: int) -> str:
        color = self.source_colors.get(name)
        if color:
            return color
        return self.default_colors[rank % len(self.default_colors)]


DEFAULT_PALETTE = AnalyticsPalette()


def count_words(text: str) -> int:
    return len(text.split())


def extract_keywords(
    items: Iterable[FeedItem],
    limit: int = TOP_KEYWORDS,
    stopwords: FrozenSet[str] = STOPWORDS,
) -> List[Tuple[str, int]]:
    """
    Most frequent title/description tokens longer than three characters.

    Ties keep the order in which the words first appear.
    """
    text = " ".join(f"{item.title} {item.description}" for item in items).lower()
    counts = Counter(
        word for word in _WORD_RE.findall(text)
        if len(word) >= MIN_KEYWORD_LENGTH and word not in stopwords
    )
    return counts.most_common(limit)


def _sentiment_slices(items: Sequence[FeedItem], palette: AnalyticsPalette) -> List[SentimentSlice]:
    counts = {"Positive": 0, "Neutral": 0, "Negative": 0}
    for item in items:
        if item.sentiment == Sentiment.POSITIVE:
            counts["Positive"] += 1
        elif item.sentiment == Sentiment.NEGATIVE:
            counts["Negative"] += 1
        else:
            counts["Neutral"] += 1
    return [
        SentimentSlice(name=name, value=value, color=palette.sentiment_colors[name])
        for name, value in counts.items()
    ]


def _source_slices(items: Sequence[FeedItem], palette: AnalyticsPalette) -> List[SourceSlice]:
    distribution = Counter(item.source for item in items)
    return [
        SourceSlice(name=name, articles=count, color=palette.source_color(name, rank))
        for rank, (name, count) in enumerate(distribution.most_common(TOP_SOURCES))
    ]


def compute_analytics(items: Iterable[FeedItem], palette: Optional[AnalyticsPalette] = None) -> AnalyticsData:
    palette = palette or DEFAULT_PALETTE
    items = list(items)
    return AnalyticsData(
        word_count=sum(count_words(item.description) for item in items),
        sources_count=len({item.source for item in items}),
        article_count=len(items),
        sentiment_data=_sentiment_slices(items, palette),
        source_data=_source_slices(items, palette),
        top_keywords=[Keyword(text=text, value=value) for text, value in extract_keywords(items)],
    )
