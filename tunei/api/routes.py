from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse
import time
import logging
from datetime import datetime, timezone

from ..models.schemas import (
    AnalyticsData, FeedsResponse, HealthResponse, ImagePromptRequest, ImagePromptResponse,
    ImagesResponse, ItemsRequest, SearchRequest, SearchResponse, SummarizeResponse,
)
from ..core.llm_config import LLMManager
from ..core.notifications import NoticeCollector
from ..services.analytics_service import compute_analytics
from ..services.feed_controller import feed_controller
from ..services.image_service import image_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/feeds", response_model=FeedsResponse)
async def get_feeds():
    """Fetch every configured feed and replace the item pool"""
    notices = NoticeCollector()
    try:
        items = await feed_controller.refresh(notices)
        return FeedsResponse(items=items, count=len(items), notices=notices.notices)
    except Exception as e:
        logger.error(f"Error fetching feeds: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch news feeds")


@router.post("/search", response_model=SearchResponse)
async def search(request: SearchRequest):
    """Filter the pool by a search term, compute analytics and summarize the matches"""
    start_time = time.time()
    notices = NoticeCollector()
    try:
        logger.info(f"Searching pool for '{request.query}'")
        outcome = await feed_controller.search(request.query, notices, summarize=request.summarize)
        if outcome.results and outcome.summary:
            notices.info(
                f'Generated an AI article about "{request.query or "all news"}" from {len(outcome.results)} sources'
            )

        processing_time = int((time.time() - start_time) * 1000)
        return SearchResponse(
            query=outcome.query,
            results=outcome.results,
            analytics=outcome.analytics,
            summary=outcome.summary,
            notices=notices.notices,
            stale=outcome.stale,
            request_id=outcome.request_id,
            processing_time_ms=processing_time,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error during search: {e}")
        raise HTTPException(status_code=500, detail="There was an error processing your search. Please try again.")


@router.post("/analytics", response_model=AnalyticsData)
async def analytics(request: ItemsRequest):
    """Compute analytics for a caller-supplied item list"""
    return compute_analytics(request.items, feed_controller.palette)


@router.post("/summarize", response_model=SummarizeResponse)
async def summarize(request: ItemsRequest):
    """Generate an article from a caller-supplied item list"""
    notices = NoticeCollector()
    try:
        summary = await feed_controller.summarizer.summarize(request.items, notices)
        return SummarizeResponse(summary=summary, notices=notices.notices)
    except Exception as e:
        logger.error(f"Error summarizing items: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate summary")


@router.get("/images", response_model=ImagesResponse)
async def images(q: str = Query(..., min_length=1, description="Image search query")):
    """Search for images matching a topic"""
    notices = NoticeCollector()
    results = await image_service.search_images(q, notices)
    return ImagesResponse(images=results, notices=notices.notices)


@router.post("/image-prompt", response_model=ImagePromptResponse)
async def image_prompt(request: ImagePromptRequest):
    """Turn article text into an image-generation prompt"""
    prompt = await feed_controller.summarizer.client.generate_image_prompt(request.content)
    return ImagePromptResponse(prompt=prompt)


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Enhanced health check with service status"""
    try:
        return HealthResponse(
            status="ok",
            message="Service is healthy",
            timestamp=datetime.now(timezone.utc),
            llm_available=feed_controller.summarizer.client.available,
            pool_size=len(feed_controller.pool),
            models=LLMManager.list_available_models(),
        )

    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "message": str(e)}
        )
