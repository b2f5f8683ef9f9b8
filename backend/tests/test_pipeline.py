"""
Question Pipeline 测试
超时与错误类型转换
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from quickanswer.core.exceptions import ProcessingError
from quickanswer.services.pipeline import QuestionPipeline, run_stage
from quickanswer.services.translator import Translator


async def _slow(value, delay=0.2):
    await asyncio.sleep(delay)
    return value


class TestRunStage:
    async def test_returns_result(self):
        assert await run_stage("translate", _slow("ok", 0), timeout=1.0) == "ok"

    async def test_timeout_becomes_processing_error(self):
        with pytest.raises(ProcessingError) as exc_info:
            await run_stage("answer", _slow("late"), timeout=0.01)
        assert exc_info.value.stage == "answer"
        assert exc_info.value.timed_out is True

    async def test_exception_becomes_processing_error(self):
        failing = AsyncMock(side_effect=RuntimeError("boom"))
        with pytest.raises(ProcessingError) as exc_info:
            await run_stage("dispatch", failing(), timeout=1.0)
        assert exc_info.value.stage == "dispatch"
        assert "boom" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestQuestionPipeline:
    async def test_process_known_question(self, pipeline):
        result = await pipeline.process("ما هذا؟")
        assert result.question == "ما هذا؟"
        assert result.translated_question == "What is this?"
        assert result.answer.startswith("This appears to be an object")

    async def test_ask_drops_non_questions(self, pipeline):
        assert await pipeline.ask("شكرا جزيلا") is None

    async def test_ask_question(self, pipeline):
        result = await pipeline.ask("أين المكتبة؟")
        assert result.translated_question == "Where is المكتبة?"
        assert "المكتبة" in result.answer

    async def test_translation_timeout(self, engine):
        pipeline = QuestionPipeline(
            translator=Translator(latency=0.2), engine=engine, translation_timeout=0.01
        )
        with pytest.raises(ProcessingError) as exc_info:
            await pipeline.process("ما هذا؟")
        assert exc_info.value.stage == "translate"

    async def test_dispatch_success(self, pipeline, device):
        await device.connect()
        assert await pipeline.dispatch(device, "hello") is True
        assert device.sent == ["hello"]

    async def test_dispatch_failure_is_not_an_error(self, pipeline):
        """send 返回 False 只记录日志"""
        sink = MagicMock()
        sink.name = "Glasses"
        sink.send = AsyncMock(return_value=False)
        assert await pipeline.dispatch(sink, "hello") is False
        sink.send.assert_awaited_once_with("hello")

    async def test_dispatch_exception_is_processing_error(self, pipeline):
        sink = MagicMock()
        sink.name = "Glasses"
        sink.send = AsyncMock(side_effect=OSError("bluetooth down"))
        with pytest.raises(ProcessingError) as exc_info:
            await pipeline.dispatch(sink, "hello")
        assert exc_info.value.stage == "dispatch"
