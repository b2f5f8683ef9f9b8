"""
Session State
会话状态封装
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel


class SessionPhase(str, Enum):
    """会话阶段"""

    IDLE = "idle"
    LISTENING = "listening"
    PROCESSING = "processing"


class SessionSnapshot(BaseModel):
    """只读快照（推送给观察者）"""

    phase: SessionPhase
    listening: bool
    connected: bool
    processing: bool
    current_question: str
    current_answer: str


@dataclass
class SessionState:
    """由 SessionController 独占修改的会话状态

    current_question / current_answer 跨周期保留，只会被覆盖，不会被自动清空。
    """

    listening: bool = False
    connected: bool = False
    current_question: str = ""
    current_answer: str = ""

    # 正在进行的处理周期数（允许重叠，最后完成者覆盖 current_answer）
    in_flight: int = 0

    @property
    def processing(self) -> bool:
        return self.in_flight > 0

    @property
    def phase(self) -> SessionPhase:
        if self.processing:
            return SessionPhase.PROCESSING
        if self.listening:
            return SessionPhase.LISTENING
        return SessionPhase.IDLE

    def begin_cycle(self, question: str):
        """开始处理周期"""
        self.current_question = question
        self.in_flight += 1

    def end_cycle(self):
        """结束处理周期（成功或失败）"""
        self.in_flight = max(0, self.in_flight - 1)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            phase=self.phase,
            listening=self.listening,
            connected=self.connected,
            processing=self.processing,
            current_question=self.current_question,
            current_answer=self.current_answer,
        )
