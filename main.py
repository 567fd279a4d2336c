"""
FastAPI main application entry point.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from aurora_qa.core.config import settings
from aurora_qa.core.logging import logger
from aurora_qa.api import router
from aurora_qa.exceptions import APIException
from aurora_qa.services import qa_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    if not settings.is_configured:
        logger.error("EXTERNAL_API_BASE_URL is not set; questions will fail until it is configured")
    elif settings.PREFETCH_ON_STARTUP:
        # Warm the cache; a failure here leaves it to populate lazily
        try:
            logger.info("[Startup] Loading all messages into cache...")
            await qa_service.cache.get_all()
        except APIException as e:
            logger.error(f"[Startup] Prefetch failed: {e.message}")
            logger.error("Continuing startup without cache...")

    yield

    logger.info("[Shutdown] Cleaning up…")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
async def root():
    return {"status": "running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        workers=settings.WORKERS,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
