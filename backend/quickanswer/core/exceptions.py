"""
Custom Exceptions
应用级自定义异常类型

会话边界处捕获并转换为用户通知，HTTP 层转换为 JSON 响应
"""

from __future__ import annotations

from typing import Any


class QuickAnswerError(Exception):
    """应用基础异常"""

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)


# ========== 语音识别异常 ==========


class RecognitionFailure(QuickAnswerError):
    """语音识别异常基类"""

    pass


class RecognitionUnavailable(RecognitionFailure):
    """缺少语音识别能力（无法开始监听）"""

    def __init__(self, message: str = "Speech recognition is not supported"):
        super().__init__(message)


class RecognitionError(RecognitionFailure):
    """监听过程中语音源报告的错误"""

    def __init__(self, error: str | None = None):
        message = "Speech recognition error"
        if error:
            message += f": {error}"
        super().__init__(message)
        self.error = error


# ========== 处理流程异常 ==========


class ProcessingError(QuickAnswerError):
    """translate / answer / dispatch 任一阶段失败"""

    def __init__(self, stage: str, message: str, details: Any = None, timed_out: bool = False):
        super().__init__(f"{stage} failed: {message}", details)
        self.stage = stage
        self.timed_out = timed_out


# ========== 设备异常 ==========


class ConnectionFailed(QuickAnswerError):
    """设备连接失败"""

    def __init__(self, device: str, message: str | None = None):
        text = f"Unable to connect to {device}"
        if message:
            text += f": {message}"
        super().__init__(text)
        self.device = device


# ========== 外部服务异常 ==========


class ExternalServiceError(QuickAnswerError):
    """外部服务调用异常基类"""

    def __init__(self, service: str, message: str, details: Any = None):
        super().__init__(f"{service} error: {message}", details)
        self.service = service


class TTSServiceError(ExternalServiceError):
    """TTS 服务异常"""

    def __init__(self, message: str, provider: str | None = None, details: Any = None):
        super().__init__("TTS", message, details)
        self.provider = provider


# ========== 验证异常 ==========


class ValidationError(QuickAnswerError):
    """验证错误"""

    def __init__(self, field: str, message: str):
        super().__init__(f"Validation error for '{field}': {message}")
        self.field = field
