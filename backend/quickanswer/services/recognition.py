"""
Speech Recognition Source
语音识别源接口

识别引擎在客户端运行（浏览器 / 移动端）；服务端只消费转录文本，
这里定义识别源的能力接口和下发给客户端的识别配置。
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol

from pydantic import BaseModel

from quickanswer.core.config import settings


class RecognitionConfig(BaseModel):
    """客户端识别器配置"""

    lang: str = settings.RECOGNITION_LANG
    continuous: bool = settings.RECOGNITION_CONTINUOUS
    interim_results: bool = settings.RECOGNITION_INTERIM_RESULTS


class SpeechSource(Protocol):
    """产生转录文本的语音识别能力"""

    async def start(self) -> None: ...

    async def stop(self) -> None: ...


class ClientSpeechSource:
    """由 WebSocket 客户端提供的识别能力

    start / stop 只负责通知客户端开启或关闭识别器，
    转录文本由客户端通过 transcript 消息推送回来。
    """

    def __init__(
        self,
        notify: Callable[[dict], Awaitable[object]],
        config: RecognitionConfig | None = None,
    ):
        self.notify = notify
        self.config = config or RecognitionConfig()
        self.active = False

    async def start(self) -> None:
        self.active = True
        await self.notify({"type": "recognition", "action": "start", "config": self.config.model_dump()})

    async def stop(self) -> None:
        self.active = False
        await self.notify({"type": "recognition", "action": "stop"})
