"""
Quick Answer Backend - FastAPI Application
阿拉伯语语音提问 -> 英语回答 -> 眼镜显示
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from quickanswer.__version__ import __version__
from quickanswer.api.v1.router import api_router
from quickanswer.core.config import settings
from quickanswer.core.exception_handlers import register_exception_handlers
from quickanswer.core.logging import setup_logging

# Configure logging (JSON in production, colored in development)
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("🚀 Starting Quick Answer Backend...")
    logger.info(f"📝 Environment: {settings.ENVIRONMENT}")
    logger.info(f"🎙️ Recognition language: {settings.RECOGNITION_LANG}")
    yield
    logger.info("👋 Shutting down Quick Answer Backend...")


app = FastAPI(
    title="Quick Answer API",
    description="Arabic voice questions → answers → G1 glasses",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register custom exception handlers
register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check"""
    return {
        "status": "healthy",
        "version": __version__,
        "checks": {
            "recognition_lang": settings.RECOGNITION_LANG,
            "tts_provider": settings.DEFAULT_TTS_PROVIDER,
            "device": settings.DEVICE_NAME,
        },
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "Welcome to Quick Answer API", "docs": "/docs", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("quickanswer.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
