# Session Services Package
"""
会话模块

包含:
- state.py: 会话状态封装
- events.py: 会话事件与订阅
- controller.py: 监听状态机与问答周期编排
"""

from quickanswer.services.session.controller import SessionController
from quickanswer.services.session.events import EventBus, SessionEvent, SessionEventType
from quickanswer.services.session.state import SessionPhase, SessionSnapshot, SessionState

__all__ = [
    "SessionController",
    "EventBus",
    "SessionEvent",
    "SessionEventType",
    "SessionPhase",
    "SessionSnapshot",
    "SessionState",
]
