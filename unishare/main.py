"""
FastAPI main application
"""

import logging

import redis
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import RedisError
from contextlib import asynccontextmanager
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from unishare.core.config import settings
from unishare.core.logging_config import configure_logging
from unishare.api.router import api_router
from unishare.api.errors import FailureResponse, failure_handler
from unishare.api.routes import chat_ws
from unishare.api.dependencies import notification_dispatcher
from unishare.db.database import SessionLocal, engine
from unishare.db.models import Base
from unishare.infrastructure.external_services.notification_dispatcher import (
    BackgroundNotificationDispatcher,
    CeleryNotificationDispatcher,
)

# Import all ORM models to ensure relationships are resolved
import unishare.infrastructure.orm  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    configure_logging()
    if settings.TESTING:
        # In-memory database: no migrations to run
        Base.metadata.create_all(bind=engine)
    if isinstance(notification_dispatcher, BackgroundNotificationDispatcher):
        notification_dispatcher.start()
    logger.info(f"Starting {settings.PROJECT_NAME} API ({settings.ENVIRONMENT})")
    yield
    if isinstance(notification_dispatcher, BackgroundNotificationDispatcher):
        await notification_dispatcher.stop()
    elif isinstance(notification_dispatcher, CeleryNotificationDispatcher):
        await notification_dispatcher.drain()
    logger.info(f"Shutting down {settings.PROJECT_NAME} API")


# Create FastAPI app
app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    description=settings.DESCRIPTION,
    version=settings.VERSION,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(FailureResponse, failure_handler)

# Include API routes
app.include_router(api_router, prefix=settings.API_V1_PREFIX)

# Chat sockets live at the root, outside the versioned prefix
app.include_router(chat_ws.router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": f"{settings.PROJECT_NAME} API", "version": settings.VERSION}


@app.get("/health")
async def health_check():
    """Health check endpoint that verifies database connectivity"""
    db = SessionLocal()
    try:
        result = db.execute(text("SELECT 1")).fetchone()
        db_status = "healthy" if result else "unhealthy"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "unhealthy"
    finally:
        db.close()

    # Redis only matters when it is the notification broker
    redis_status = "not_configured"
    if settings.NOTIFICATION_BACKEND == "celery" and not settings.TESTING:
        try:
            redis.from_url(settings.REDIS_URL, socket_timeout=2).ping()
            redis_status = "healthy"
        except RedisError as e:
            logger.warning(f"Redis health check failed: {e}")
            redis_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "database": db_status,
        "redis": redis_status,
        "notifications": settings.NOTIFICATION_BACKEND,
        "version": settings.VERSION
    }


if __name__ == "__main__":
    uvicorn.run(
        "unishare.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
