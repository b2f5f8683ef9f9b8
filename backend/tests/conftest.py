"""
Pytest Fixtures
共享测试夹具（所有模拟延迟置零）
"""

from collections.abc import AsyncGenerator
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient

from quickanswer.api.deps import get_device, get_pipeline
from quickanswer.main import app
from quickanswer.services.answer_engine import AnswerEngine
from quickanswer.services.device_sink import SimulatedGlassesSink
from quickanswer.services.pipeline import QuestionPipeline
from quickanswer.services.session import SessionController, SessionEvent
from quickanswer.services.translator import Translator


class FakeSpeechSource:
    """记录 start / stop 调用的识别源"""

    def __init__(self):
        self.started = 0
        self.stopped = 0

    async def start(self) -> None:
        self.started += 1

    async def stop(self) -> None:
        self.stopped += 1


class RecordingSpeechSink:
    """记录朗读请求的语音输出"""

    def __init__(self):
        self.spoken: list[tuple[str, str]] = []

    async def speak(self, text: str, lang: str) -> None:
        self.spoken.append((text, lang))


@pytest.fixture
def fixed_clock():
    """固定时钟"""
    return lambda: datetime(2024, 1, 1, 12, 34, 56)


@pytest.fixture
def translator() -> Translator:
    return Translator(latency=0)


@pytest.fixture
def engine(fixed_clock) -> AnswerEngine:
    return AnswerEngine(clock=fixed_clock, latency=0)


@pytest.fixture
def pipeline(translator, engine) -> QuestionPipeline:
    return QuestionPipeline(translator=translator, engine=engine)


@pytest.fixture
def device() -> SimulatedGlassesSink:
    return SimulatedGlassesSink(connect_latency=0, send_latency=0)


@pytest.fixture
def speech_source() -> FakeSpeechSource:
    return FakeSpeechSource()


@pytest.fixture
def speech_sink() -> RecordingSpeechSink:
    return RecordingSpeechSink()


@pytest.fixture
def controller(pipeline, speech_source, device, speech_sink) -> SessionController:
    return SessionController(
        pipeline=pipeline,
        speech_source=speech_source,
        device=device,
        speech_sink=speech_sink,
        session_id="test-session",
    )


@pytest.fixture
def events(controller) -> list[SessionEvent]:
    """收集 controller 发出的所有事件"""
    collected: list[SessionEvent] = []
    controller.subscribe(collected.append)
    return collected


@pytest.fixture
def override_dependencies(pipeline):
    """API 使用零延迟流水线和设备"""
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_device] = lambda: SimulatedGlassesSink(
        connect_latency=0, send_latency=0
    )
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def client(override_dependencies) -> AsyncGenerator[AsyncClient, None]:
    """Get test client"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
