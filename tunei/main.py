from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from contextlib import asynccontextmanager
import logging

from .api.routes import router as api_router
from .core.config import settings
from .services.feed_controller import feed_controller
from .services.image_service import image_service

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic for the FastAPI app."""
    logger.info("Starting up Tunei...")
    try:
        yield
    finally:
        # Close the shared aiohttp sessions to avoid unclosed client warnings.
        for client in (feed_controller.fetcher, feed_controller.summarizer.client, image_service):
            try:
                await client.close()
            except Exception as e:
                logger.warning(f"Error closing {client.__class__.__name__} session: {e}")
        logger.info("Shutting down Tunei...")

# Initialize FastAPI app
app = FastAPI(
    title="Tunei - News Aggregation and Analytics",
    description="RSS aggregation, search analytics and AI-generated news summaries",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "ok", "message": "Service is healthy"}

# Mount all API routes
app.include_router(api_router, prefix="/api")

# Dev entry point
if __name__ == "__main__":
    uvicorn.run(
        "tunei.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.is_development
    )
