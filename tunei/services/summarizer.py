"""
Summary article generation.

``SummarizationAdapter.summarize`` always produces an article.  With at
least two items and a configured collaborator it asks the LLM for one;
otherwise, or when that single attempt fails, it stitches an article
together from the item descriptions.  Topics and entities are computed
locally on either path.
"""
import logging
from datetime import date
from typing import List, Optional, Sequence

from ..core.notifications import LoggingNotifier, Notifier
from ..models.schemas import FeedItem, NoticeLevel, SummaryResult, SummaryState
from .analytics_service import extract_keywords
from .entity_extractor import CapitalizedBigramExtractor, EntityExtractor
from .llm_service import LLMService

logger = logging.getLogger(__name__)

MIN_ITEMS_FOR_LLM = 2
FALLBACK_WARNING = "There was an error generating the AI summary. Using simplified analysis instead."


class SummaryRequest:
    """Tracks one summarization attempt: idle -> requesting -> succeeded|failed -> completed."""

    _TRANSITIONS = {
        SummaryState.IDLE: {SummaryState.REQUESTING, SummaryState.COMPLETED},
        SummaryState.REQUESTING: {SummaryState.SUCCEEDED, SummaryState.FAILED},
        SummaryState.SUCCEEDED: {SummaryState.COMPLETED},
        SummaryState.FAILED: {SummaryState.COMPLETED},
        SummaryState.COMPLETED: set(),
    }

    def __init__(self, item_count: int):
        self.item_count = item_count
        self.state = SummaryState.IDLE
        self.history: List[SummaryState] = [self.state]

    def advance(self, state: SummaryState):
        if state not in self._TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid summary state transition {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)


def split_paragraphs(article: str) -> List[str]:
    return article.split("\n\n")


def build_fallback_article(items: Sequence[FeedItem], today: Optional[date] = None) -> str:
    """Template article built from the item descriptions alone."""
    sources = [source for source in dict.fromkeys(item.source for item in items) if source]
    source_text = ", ".join(sources) if sources else "various news outlets"

    if not items:
        headline = "Today's Top Stories: Global and Regional Updates"
        today = today or date.today()
        return (
            f"{headline}\n\n"
            f"As of {today.strftime('%B')} {today.day}, {today.year}, current events around the globe continue "
            "to develop. Economic, political, and social trends are shifting as various factors influence "
            "regional stability and growth. Analysts are closely monitoring these developments and their "
            "potential impacts. More details will emerge as reporting continues."
        )

    headline = f"Latest Updates: {' '.join(items[0].title.split(' ')[:5])}..."
    paragraphs = [headline, items[0].description]

    expert = "Experts are closely monitoring these developments."
    if len(items) > 1:
        expert += f' According to {items[1].source}, "{items[1].description[:100]}..."'
    paragraphs.append(expert)

    analysis = "The implications of these events are significant."
    if len(items) > 2:
        analysis += f" {items[2].description[:150]}..."
    paragraphs.append(analysis)

    paragraphs.append(f"As the situation continues to evolve, more updates are expected from {source_text}.")
    return "\n\n".join(paragraphs)


class SummarizationAdapter:
    def __init__(
        self,
        client: Optional[LLMService] = None,
        entity_extractor: Optional[EntityExtractor] = None,
    ):
        self.client = client if client is not None else LLMService()
        self.entity_extractor = entity_extractor or CapitalizedBigramExtractor()

    def _topics(self, items: Sequence[FeedItem]) -> List[str]:
        return [word for word, _ in extract_keywords(items)]

    def _fallback(self, items: Sequence[FeedItem], request: SummaryRequest) -> SummaryResult:
        article = build_fallback_article(items)
        paragraphs = split_paragraphs(article)
        summary = paragraphs[0] + " " + (paragraphs[1] if len(paragraphs) > 1 else "")
        if len(items) == 1:
            article = f"{article}\n\nThis article includes information from: {items[0].source}"
            summary = items[0].description
        request.advance(SummaryState.COMPLETED)
        return SummaryResult(
            summary=summary.strip(),
            article=article,
            topics=self._topics(items),
            entities=self.entity_extractor.extract(items),
            used_fallback=True,
            state=request.state,
        )

    async def summarize(self, items: Sequence[FeedItem], notifier: Optional[Notifier] = None) -> SummaryResult:
        notifier = notifier or LoggingNotifier()
        items = list(items)
        request = SummaryRequest(len(items))

        if not self.client.available:
            logger.info("LLM is not enabled, using offline summarization")
            return self._fallback(items, request)
        if len(items) < MIN_ITEMS_FOR_LLM:
            logger.info("Not enough items to summarize, generating basic article")
            return self._fallback(items, request)

        sources = [
            {
                "title": item.title,
                "description": item.description,
                "source": item.source,
                "link": item.link,
                "publishDate": item.publish_date,
            }
            for item in items
        ]
        logger.info(f"Preparing to summarize {len(items)} items with the LLM")
        request.advance(SummaryState.REQUESTING)
        try:
            article = await self.client.generate_article(sources)
        except Exception as e:
            logger.error(f"Error generating AI summary: {e!r}")
            request.advance(SummaryState.FAILED)
            notifier.notify(NoticeLevel.WARNING, FALLBACK_WARNING)
            return self._fallback(items, request)

        request.advance(SummaryState.SUCCEEDED)
        request.advance(SummaryState.COMPLETED)
        return SummaryResult(
            summary=split_paragraphs(article)[0],
            article=article,
            topics=self._topics(items),
            entities=self.entity_extractor.extract(items),
            used_fallback=False,
            state=request.state,
        )
