"""
WebSocket Connection Manager
连接管理器
"""

from __future__ import annotations

from fastapi import WebSocket
from loguru import logger

from quickanswer.services.session.events import SessionEvent


class ConnectionManager:
    """管理 WebSocket 连接"""

    def __init__(self):
        self.active_connections: dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket, client_id: str):
        """接受并注册连接"""
        await websocket.accept()
        self.active_connections[client_id] = websocket
        logger.debug(f"WebSocket connected: {client_id}")

    def disconnect(self, client_id: str):
        """断开连接"""
        if client_id in self.active_connections:
            del self.active_connections[client_id]
            logger.debug(f"WebSocket disconnected: {client_id}")

    def is_connected(self, client_id: str) -> bool:
        return client_id in self.active_connections

    async def send_json(self, client_id: str, data: dict) -> bool:
        """发送 JSON 消息，返回是否成功"""
        websocket = self.active_connections.get(client_id)
        if not websocket:
            return False

        try:
            await websocket.send_json(data)
            return True
        except Exception as e:
            logger.warning(f"Failed to send to {client_id}: {e}")
            self.disconnect(client_id)
            return False

    async def send_bytes(self, client_id: str, data: bytes) -> bool:
        """发送二进制帧（朗读音频）"""
        websocket = self.active_connections.get(client_id)
        if not websocket:
            return False

        try:
            await websocket.send_bytes(data)
            return True
        except Exception as e:
            logger.warning(f"Failed to send audio to {client_id}: {e}")
            self.disconnect(client_id)
            return False

    async def send_event(self, client_id: str, event: SessionEvent) -> bool:
        """发送会话事件"""
        return await self.send_json(client_id, {"kind": "event", **event.model_dump(mode="json")})

    async def send_error(self, client_id: str, message: str) -> bool:
        return await self.send_json(client_id, {"type": "error", "message": message})

    async def send_pong(self, client_id: str) -> bool:
        return await self.send_json(client_id, {"type": "pong"})


# 全局连接管理器实例
manager = ConnectionManager()
