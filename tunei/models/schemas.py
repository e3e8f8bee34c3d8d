from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime
from enum import Enum

from ..utils.dates import parse_instant, utc_now_iso


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class NoticeLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class SummaryState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    COMPLETED = "completed"


class FeedItem(BaseModel):
    """A normalized feed entry.  Serialized with the camelCase names the UI expects."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1, description="Source slug plus ordinal index within its feed")
    title: str = Field("", description="Entry title (may be empty)")
    description: str = Field("", description="Plain-text description with HTML removed")
    content: str = Field("", description="Raw entry content, possibly HTML")
    link: str = Field("", description="Entry URL")
    source: str = Field("", description="Channel title of the feed")
    source_url: str = Field("", alias="sourceUrl", description="Channel link of the feed")
    image_url: Optional[str] = Field(None, alias="imageUrl", description="First image found in the content")
    publish_date: str = Field(default_factory=utc_now_iso, alias="publishDate", description="ISO-8601 publish time")
    sentiment: Optional[Sentiment] = Field(None, description="Sentiment label")

    @field_validator("title", "description", "content", "link", "source", "source_url", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("image_url", mode="before")
    @classmethod
    def _empty_image_to_none(cls, value):
        return value or None

    @field_validator("publish_date", mode="before")
    @classmethod
    def _normalize_publish_date(cls, value):
        if value is None or value == "":
            return utc_now_iso()
        if isinstance(value, datetime):
            return value.isoformat()
        parsed = parse_instant(value)
        if parsed is None:
            raise ValueError(f"publishDate is not a valid date: {value!r}")
        return value if _is_iso(value) else parsed.isoformat()


def _is_iso(value: str) -> bool:
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
        return True
    except ValueError:
        return False


class SentimentSlice(BaseModel):
    name: str = Field(..., description="Bucket label: Positive, Neutral or Negative")
    value: int = Field(..., ge=0, description="Number of items in the bucket")
    color: str = Field(..., description="Display color")


class SourceSlice(BaseModel):
    name: str = Field(..., description="Source name")
    articles: int = Field(..., ge=0, description="Number of items from the source")
    color: str = Field(..., description="Display color")


class Keyword(BaseModel):
    text: str
    value: int = Field(..., ge=1, description="Occurrence count")


class AnalyticsData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    word_count: int = Field(0, alias="wordCount")
    sources_count: int = Field(0, alias="sourcesCount")
    article_count: int = Field(0, alias="articleCount")
    sentiment_data: List[SentimentSlice] = Field(default_factory=list, alias="sentimentData")
    source_data: List[SourceSlice] = Field(default_factory=list, alias="sourceData")
    top_keywords: List[Keyword] = Field(default_factory=list, alias="topKeywords")


class Entity(BaseModel):
    name: str
    type: str


class SummaryResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: str = Field(..., description="Lead paragraph of the article")
    article: str = Field(..., description="Full generated article; the first line is the headline")
    topics: List[str] = Field(default_factory=list)
    entities: List[Entity] = Field(default_factory=list)
    used_fallback: bool = Field(False, alias="usedFallback", description="True when the offline template was used")
    state: SummaryState = Field(SummaryState.COMPLETED)


class ImageResult(BaseModel):
    url: str
    title: str = ""
    source: str
    width: Optional[int] = None
    height: Optional[int] = None


class Notice(BaseModel):
    level: NoticeLevel
    message: str


class SearchRequest(BaseModel):
    query: Optional[str] = Field(None, description="Search term; empty returns the whole pool")
    summarize: bool = Field(True, description="Generate an article from the filtered items")


class ItemsRequest(BaseModel):
    items: List[FeedItem] = Field(default_factory=list)


class FeedsResponse(BaseModel):
    items: List[FeedItem]
    count: int
    notices: List[Notice] = Field(default_factory=list)


class SearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: Optional[str] = None
    results: List[FeedItem]
    analytics: AnalyticsData
    summary: Optional[SummaryResult] = None
    notices: List[Notice] = Field(default_factory=list)
    stale: bool = Field(False, description="True when a newer search was published first")
    request_id: int = Field(..., alias="requestId")
    processing_time_ms: int = Field(..., alias="processingTimeMs")


class SummarizeResponse(BaseModel):
    summary: SummaryResult
    notices: List[Notice] = Field(default_factory=list)


class ImagesResponse(BaseModel):
    images: List[ImageResult]
    notices: List[Notice] = Field(default_factory=list)


class ImagePromptRequest(BaseModel):
    content: str = Field(..., min_length=1, description="Text to illustrate")


class ImagePromptResponse(BaseModel):
    prompt: str


class HealthResponse(BaseModel):
    status: str = Field(..., description="Overall API status ('ok' or 'unhealthy')")
    message: str = Field(..., description="Descriptive health message")
    timestamp: datetime = Field(..., description="Timestamp of health check (UTC)")
    llm_available: bool = Field(..., description="True if the text-generation collaborator is configured")
    pool_size: int = Field(0, description="Number of items currently in the pool")
    models: Dict[str, Any] = Field(default_factory=dict, description="Configured text-generation providers")
