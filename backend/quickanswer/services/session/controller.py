"""
Session Controller
会话控制器 - 监听状态机 + 问答周期编排 + 设备分发

状态: Idle -> Listening -> Processing -> Listening / Idle
设备连接 (connected) 是独立的布尔状态，只影响最后的分发步骤。

并发策略: 新问题到来时直接开始新周期，不取消进行中的周期；
哪个周期最后完成，哪个周期的回答覆盖 current_answer（last write wins）。
所有状态修改都在事件循环线程中进行（单写者）。
"""

from __future__ import annotations

import asyncio
import uuid

from loguru import logger

from quickanswer.core.config import settings
from quickanswer.core.exceptions import (
    ConnectionFailed,
    ProcessingError,
    RecognitionError,
    RecognitionUnavailable,
)
from quickanswer.core.logging import log_session_event
from quickanswer.services.device_sink import DeviceSink
from quickanswer.services.pipeline import PipelineResult, QuestionPipeline
from quickanswer.services.recognition import SpeechSource
from quickanswer.services.session.events import EventBus, Listener, SessionEvent, SessionEventType
from quickanswer.services.session.state import SessionSnapshot, SessionState
from quickanswer.services.tts_service import SpeechSink


class SessionController:
    """会话控制器

    Attributes:
        pipeline: classify -> translate -> answer 流水线
        speech_source: 语音识别能力（None 表示不可用）
        device: 可穿戴设备输出通道
        speech_sink: 语音输出通道（仅在用户显式触发时使用）
    """

    def __init__(
        self,
        pipeline: QuestionPipeline | None = None,
        speech_source: SpeechSource | None = None,
        device: DeviceSink | None = None,
        speech_sink: SpeechSink | None = None,
        session_id: str | None = None,
        connect_timeout: float = settings.DEVICE_CONNECT_TIMEOUT,
        speech_lang: str = settings.SPEECH_LANG,
    ):
        self.pipeline = pipeline or QuestionPipeline()
        self.speech_source = speech_source
        self.device = device
        self.speech_sink = speech_sink
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.connect_timeout = connect_timeout
        self.speech_lang = speech_lang

        self.state = SessionState()
        self.events = EventBus()

        self._cycle_seq = 0
        self._tasks: set[asyncio.Task] = set()
        self._unavailable_reported = False
        self._connecting = False
        # disconnect_device 递增；connect 完成时若已变化则结果作废
        self._connect_epoch = 0

    # ========== 订阅 ==========

    def subscribe(self, listener: Listener):
        """订阅会话事件，返回取消订阅函数"""
        return self.events.subscribe(listener)

    def snapshot(self) -> SessionSnapshot:
        return self.state.snapshot()

    def _state_changed(self):
        self.events.emit(SessionEvent.state_changed(self.state.snapshot()))

    def _notify(self, event_type: SessionEventType, description: str | None = None, **data):
        log_session_event(event_type.value, self.session_id, data)
        self.events.emit(
            SessionEvent.notification(
                event_type, description=description, state=self.state.snapshot(), **data
            )
        )

    # ========== 监听 ==========

    async def start_listening(self) -> bool:
        """Idle -> Listening；识别能力缺失时通知一次，不重试"""
        if self.state.listening:
            return True

        try:
            if self.speech_source is None:
                raise RecognitionUnavailable()
            await self.speech_source.start()
        except RecognitionUnavailable as e:
            logger.warning(f"[{self.session_id}] {e.message}")
            if not self._unavailable_reported:
                self._unavailable_reported = True
                self._notify(SessionEventType.RECOGNITION_UNAVAILABLE, error=e.message)
            return False

        self.state.listening = True
        self._notify(SessionEventType.LISTENING_STARTED)
        self._state_changed()
        return True

    async def stop_listening(self):
        """Listening -> Idle（进行中的周期继续完成）"""
        if not self.state.listening:
            return

        if self.speech_source is not None:
            await self.speech_source.stop()
        self.state.listening = False
        self._notify(SessionEventType.LISTENING_STOPPED)
        self._state_changed()

    def handle_recognition_error(self, error: str | None = None):
        """识别源报告错误：通知用户，保持监听"""
        exc = RecognitionError(error)
        logger.error(f"[{self.session_id}] {exc.message}")
        self._notify(SessionEventType.RECOGNITION_ERROR, error=error)

    # ========== 问答周期 ==========

    def handle_transcript(self, text: str) -> asyncio.Task | None:
        """接收一条转录（替换而非追加）；是问题时开始新周期并返回其任务"""
        if not self.state.listening:
            logger.debug(f"[{self.session_id}] Transcript ignored while not listening")
            return None
        if not self.pipeline.is_question(text):
            return None
        return self.submit_question(text)

    def submit_question(self, question: str) -> asyncio.Task:
        self._cycle_seq += 1
        cycle = self._cycle_seq
        self.state.begin_cycle(question)
        self._state_changed()

        task = asyncio.create_task(self._run_cycle(cycle, question))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_cycle(self, cycle: int, question: str) -> PipelineResult | None:
        log = logger.bind(session_id=self.session_id, cycle=cycle)
        log.info(f"Processing question: {question}")
        try:
            result = await self.pipeline.process(question)
            self.state.current_answer = result.answer
            self._state_changed()

            delivered = False
            if self.state.connected and self.device is not None:
                delivered = await self.pipeline.dispatch(self.device, result.answer)

            self._notify(
                SessionEventType.QUESTION_PROCESSED,
                description="Answer ready and sent to glasses" if delivered else None,
                cycle=cycle,
                question=result.question,
                translated_question=result.translated_question,
                answer=result.answer,
                delivered=delivered,
            )
            return result
        except ProcessingError as e:
            log.error(f"Cycle failed: {e.message}")
            self._notify(
                SessionEventType.PROCESSING_ERROR,
                cycle=cycle,
                stage=e.stage,
                error=e.message,
            )
            return None
        finally:
            self.state.end_cycle()
            self._state_changed()

    async def drain(self):
        """等待所有进行中的周期完成"""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ========== 设备 ==========

    async def _connect(self):
        if self.device is None:
            raise ConnectionFailed("device", "no device configured")
        try:
            await asyncio.wait_for(self.device.connect(), timeout=self.connect_timeout)
        except asyncio.TimeoutError as e:
            raise ConnectionFailed(self.device.name, "timed out") from e
        except ConnectionFailed:
            raise
        except Exception as e:
            raise ConnectionFailed(self.device.name, str(e)) from e

    async def connect_device(self) -> bool:
        """连接设备；失败时通知，connected 保持 False，不自动重试

        同一时间只允许一次连接；连接过程中收到 disconnect 时，本次连接结果被丢弃
        """
        if self.state.connected:
            return True
        if self._connecting:
            logger.debug(f"[{self.session_id}] Connect already in progress")
            return False

        self._connecting = True
        epoch = self._connect_epoch
        try:
            await self._connect()
        except ConnectionFailed as e:
            logger.warning(f"[{self.session_id}] {e.message}")
            self._notify(SessionEventType.DEVICE_CONNECTION_FAILED, error=e.message)
            return False
        finally:
            self._connecting = False

        if epoch != self._connect_epoch:
            logger.info(f"[{self.session_id}] Disconnected while connecting, dropping connection")
            return False

        self.state.connected = True
        self._notify(SessionEventType.DEVICE_CONNECTED, device=self.device.name)
        self._state_changed()
        return True

    def disconnect_device(self):
        self._connect_epoch += 1
        if not self.state.connected:
            return
        self.state.connected = False
        self._state_changed()

    # ========== 语音输出 ==========

    async def speak_answer(self) -> bool:
        """用户显式触发时朗读当前回答；无回答或无语音输出能力时不做任何事"""
        answer = self.state.current_answer
        if not answer or self.speech_sink is None:
            return False
        await self.speech_sink.speak(answer, self.speech_lang)
        return True

    # ========== 生命周期 ==========

    async def close(self):
        """结束会话：停止监听并等待进行中的周期"""
        if self.state.listening:
            await self.stop_listening()
        await self.drain()
        logger.info(f"[{self.session_id}] Session closed")
