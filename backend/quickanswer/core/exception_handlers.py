"""
Exception Handlers
全局异常处理器，将自定义异常转换为 HTTP 响应

识别与设备异常只出现在 WebSocket 会话中，由 SessionController 转换为事件
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from quickanswer.core.exceptions import (
    ProcessingError,
    QuickAnswerError,
    TTSServiceError,
    ValidationError,
)


def register_exception_handlers(app: FastAPI) -> None:
    """注册全局异常处理器"""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=422,
            content={"detail": exc.message, "field": exc.field},
        )

    @app.exception_handler(ProcessingError)
    async def processing_error_handler(request: Request, exc: ProcessingError):
        logger.error(f"Processing Error: {exc.message}", stage=exc.stage)
        return JSONResponse(
            status_code=504 if exc.timed_out else 502,
            content={"detail": exc.message, "stage": exc.stage},
        )

    @app.exception_handler(TTSServiceError)
    async def tts_error_handler(request: Request, exc: TTSServiceError):
        logger.error(f"TTS Service Error: {exc.message}", provider=exc.provider)
        return JSONResponse(
            status_code=502,
            content={
                "detail": exc.message,
                "service": "tts",
                "provider": exc.provider,
            },
        )

    @app.exception_handler(QuickAnswerError)
    async def quickanswer_error_handler(request: Request, exc: QuickAnswerError):
        """兜底处理所有 QuickAnswerError"""
        logger.error(f"QuickAnswer Error: {exc.message}")
        return JSONResponse(
            status_code=500,
            content={"detail": exc.message},
        )
