"""
Message Dispatcher - Main Application Entry Point

Sends unsent messages from the database to a delivery webhook on a fixed
schedule, using FastAPI, SQLAlchemy, APScheduler, httpx and Redis.
"""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.processor_routes import router as processor_router
from app.config.settings import get_settings
from app.infrastructure.database import async_session_factory, dispose_database, init_database
from app.infrastructure.delivery_client import WebhookDeliveryClient
from app.infrastructure.message_repository import MessageRepository
from app.infrastructure.redis_cache import RedisCache
from app.infrastructure.scheduler import get_scheduler, start_scheduler, stop_scheduler
from app.usecases.dispatch_service import DispatchService
from app.usecases.message_processor import MessageProcessor

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting {settings.app_name}...")

    logger.info("Initializing database...")
    await init_database()
    logger.info("Database initialized")

    logger.info("Starting scheduler...")
    await start_scheduler()

    repository = MessageRepository(async_session_factory)
    delivery_client = WebhookDeliveryClient.from_settings(settings)
    cache = RedisCache.from_settings(settings)

    dispatcher = DispatchService(
        store=repository,
        client=delivery_client,
        cache=cache,
        batch_size=settings.processor_batch_size,
        cache_ttl=timedelta(seconds=settings.cache_ttl_seconds),
    )
    processor = MessageProcessor(
        dispatcher=dispatcher,
        store=repository,
        scheduler=get_scheduler(),
        interval_seconds=settings.processor_interval_seconds,
    )
    app.state.message_processor = processor

    if settings.processor_auto_start:
        processor.start()

    logger.info("Application startup complete!")
    logger.info(f"Delivery endpoint: {settings.delivery_url}{settings.delivery_path}")
    logger.info(f"Batch size: {settings.processor_batch_size}, interval: {settings.processor_interval_seconds}s")

    yield

    # Shutdown
    logger.info("Shutting down...")
    if processor.is_running:
        processor.stop()
    await stop_scheduler()
    await delivery_client.aclose()
    await cache.aclose()
    await dispose_database()
    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Scheduled dispatcher for outbound messages",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "GET"],
    allow_headers=["*"],
)

# Register routers
app.include_router(processor_router, tags=["Processor"])


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "endpoints": {
            "start": "/processor/start",
            "stop": "/processor/stop",
            "status": "/processor/status",
            "sent_messages": "/processor/sent-messages",
            "health": "/health"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "message-dispatcher"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
