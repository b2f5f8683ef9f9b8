"""
Logging Configuration
日志配置 - 开发环境彩色输出，生产环境 JSON（保留阿拉伯语原文）

使用方法:
    from quickanswer.core.logging import setup_logging
    setup_logging()
"""

from __future__ import annotations

import json
import sys
from typing import Any

from loguru import logger

from quickanswer.core.config import settings

# 不写入 JSON extra 的 loguru 内部字段
_HIDDEN_EXTRA = ("color",)

DEV_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def json_serializer(record: dict) -> str:
    """单条日志 -> JSON 行（session_id / cycle 等 bind 字段放在 extra）"""
    entry: dict[str, Any] = {
        "timestamp": record["time"].strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
        "level": record["level"].name,
        "message": record["message"],
        "module": record["name"],
        "function": record["function"],
        "line": record["line"],
    }

    extra = {
        key: value
        for key, value in record["extra"].items()
        if not key.startswith("_") and key not in _HIDDEN_EXTRA
    }
    if extra:
        entry["extra"] = extra

    exc = record["exception"]
    if exc:
        entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
            "traceback": "".join(exc.traceback.format()) if exc.traceback else None,
        }

    return json.dumps(entry, ensure_ascii=False, default=str)


def json_sink(message):
    sys.stderr.write(json_serializer(message.record) + "\n")
    sys.stderr.flush()


def setup_logging() -> None:
    """替换 loguru 默认 handler；production 用 JSON，其他环境用彩色格式"""
    logger.remove()

    if settings.ENVIRONMENT == "production":
        # diagnose 会打印变量值（可能包含用户问题），生产环境关闭
        logger.add(json_sink, level=settings.LOG_LEVEL, backtrace=True, diagnose=False)
        logger.info("Logging configured", format="json", level=settings.LOG_LEVEL)
    else:
        logger.add(
            sys.stderr,
            level=settings.LOG_LEVEL,
            format=DEV_FORMAT,
            backtrace=True,
            diagnose=True,
        )


def log_session_event(event: str, session_id: str, details: dict[str, Any] | None = None):
    """记录会话事件（通知 / 状态变化）"""
    logger.debug(f"Session: {event}", event=event, session_id=session_id, **(details or {}))


def log_external_call(
    service: str,
    provider: str,
    duration_ms: float,
    success: bool,
    error: str | None = None,
):
    """记录外部服务调用（TTS 等）的耗时和结果"""
    log = logger.info if success else logger.warning
    log(
        f"External call: {service}/{provider}",
        service=service,
        provider=provider,
        duration_ms=round(duration_ms, 2),
        success=success,
        error=error,
    )
