"""
Session Events
会话事件与订阅接口

展示层（Web / 移动端）通过订阅事件渲染通知和状态徽标，不直接持有会话状态。
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, Literal

from loguru import logger
from pydantic import BaseModel, Field

from quickanswer.services.session.state import SessionSnapshot


class SessionEventType(str, Enum):
    RECOGNITION_UNAVAILABLE = "recognition_unavailable"
    RECOGNITION_ERROR = "recognition_error"
    LISTENING_STARTED = "listening_started"
    LISTENING_STOPPED = "listening_stopped"
    QUESTION_PROCESSED = "question_processed"
    PROCESSING_ERROR = "processing_error"
    DEVICE_CONNECTED = "device_connected"
    DEVICE_CONNECTION_FAILED = "device_connection_failed"
    STATE_CHANGED = "state_changed"


Variant = Literal["default", "destructive"]

# 用户可见通知文案: type -> (title, description, variant)
NOTIFICATIONS: dict[SessionEventType, tuple[str, str, Variant]] = {
    SessionEventType.RECOGNITION_UNAVAILABLE: (
        "Speech Recognition Not Supported",
        "Your browser doesn't support speech recognition.",
        "destructive",
    ),
    SessionEventType.RECOGNITION_ERROR: (
        "Speech Recognition Error",
        "Unable to process speech. Please try again.",
        "destructive",
    ),
    SessionEventType.LISTENING_STARTED: (
        "Listening Started",
        "Speak your question in Arabic",
        "default",
    ),
    SessionEventType.LISTENING_STOPPED: (
        "Listening Stopped",
        "Speech recognition disabled",
        "default",
    ),
    SessionEventType.QUESTION_PROCESSED: (
        "Question Processed",
        "Answer ready",
        "default",
    ),
    SessionEventType.PROCESSING_ERROR: (
        "Processing Error",
        "Failed to process question",
        "destructive",
    ),
    SessionEventType.DEVICE_CONNECTED: (
        "Glasses Connected",
        "Ready to send answers to your glasses",
        "default",
    ),
    SessionEventType.DEVICE_CONNECTION_FAILED: (
        "Connection Failed",
        "Unable to connect to glasses",
        "destructive",
    ),
}


class SessionEvent(BaseModel):
    """会话事件"""

    type: SessionEventType
    title: str = ""
    description: str = ""
    variant: Variant = "default"
    data: dict[str, Any] = Field(default_factory=dict)
    state: SessionSnapshot | None = None

    @property
    def is_notification(self) -> bool:
        return self.type in NOTIFICATIONS

    @classmethod
    def notification(
        cls,
        event_type: SessionEventType,
        description: str | None = None,
        state: SessionSnapshot | None = None,
        **data: Any,
    ) -> "SessionEvent":
        title, default_description, variant = NOTIFICATIONS[event_type]
        return cls(
            type=event_type,
            title=title,
            description=description or default_description,
            variant=variant,
            data=data,
            state=state,
        )

    @classmethod
    def state_changed(cls, state: SessionSnapshot) -> "SessionEvent":
        return cls(type=SessionEventType.STATE_CHANGED, state=state)


Listener = Callable[[SessionEvent], None]


class EventBus:
    """同步事件分发；单个监听器出错不影响其他监听器和会话本身"""

    def __init__(self):
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: SessionEvent):
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.warning(f"Session event listener failed on {event.type.value}: {e}")

    def __len__(self) -> int:
        return len(self._listeners)
