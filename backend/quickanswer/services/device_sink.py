"""
Device Sink
可穿戴显示设备（G1 眼镜）输出通道

真实设备通过蓝牙连接；这里只定义接口和一个模拟实现。
"""

from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

from loguru import logger

from quickanswer.core.config import settings
from quickanswer.core.exceptions import ConnectionFailed


@runtime_checkable
class DeviceSink(Protocol):
    """接受最终回答文本的设备"""

    name: str

    async def connect(self) -> None:
        """建立连接，失败时抛出 ConnectionFailed"""
        ...

    async def send(self, text: str) -> bool:
        """发送文本，返回是否成功"""
        ...


class SimulatedGlassesSink:
    """模拟的 G1 眼镜

    connect / send 只等待固定延迟；可通过 fail_connect / fail_send 模拟失败。
    已发送的文本保存在 sent 中，便于调试。
    """

    def __init__(
        self,
        name: str | None = None,
        connect_latency: float | None = None,
        send_latency: float | None = None,
        fail_connect: bool = False,
        fail_send: bool = False,
    ):
        self.name = name or settings.DEVICE_NAME
        self.connect_latency = (
            settings.DEVICE_CONNECT_LATENCY if connect_latency is None else connect_latency
        )
        self.send_latency = settings.DISPATCH_LATENCY if send_latency is None else send_latency
        self.fail_connect = fail_connect
        self.fail_send = fail_send
        self.connected = False
        self.sent: list[str] = []

    async def connect(self) -> None:
        if self.connect_latency:
            await asyncio.sleep(self.connect_latency)
        if self.fail_connect:
            raise ConnectionFailed(self.name, "device not responding")
        self.connected = True
        logger.info(f"{self.name} connected")

    async def send(self, text: str) -> bool:
        if self.send_latency:
            await asyncio.sleep(self.send_latency)
        if self.fail_send or not self.connected:
            logger.warning(f"Failed to send to {self.name}")
            return False
        self.sent.append(text)
        logger.info(f"Sending to {self.name}: {text}")
        return True
