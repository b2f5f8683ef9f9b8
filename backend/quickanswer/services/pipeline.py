"""
Question Pipeline
classify -> translate -> answer，外部调用统一加超时和错误类型
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import TypeVar

from loguru import logger

from quickanswer.core.config import settings
from quickanswer.core.exceptions import ProcessingError
from quickanswer.services.answer_engine import AnswerEngine
from quickanswer.services.classifier import QuestionClassifier
from quickanswer.services.device_sink import DeviceSink
from quickanswer.services.translator import Translator

T = TypeVar("T")


@dataclass
class PipelineResult:
    """一次问答结果"""

    question: str
    translated_question: str
    answer: str


async def run_stage(stage: str, awaitable: Awaitable[T], timeout: float) -> T:
    """执行单个阶段；超时或异常统一转换为 ProcessingError"""
    start = time.perf_counter()
    try:
        result = await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise ProcessingError(stage, f"timed out after {timeout}s", timed_out=True) from e
    except ProcessingError:
        raise
    except Exception as e:
        raise ProcessingError(stage, str(e) or type(e).__name__) from e

    logger.debug(f"Stage {stage} finished in {(time.perf_counter() - start) * 1000:.1f}ms")
    return result


class QuestionPipeline:
    """问答流水线

    Attributes:
        classifier: 问题分类器
        translator: 翻译器
        engine: 回答引擎
    """

    def __init__(
        self,
        classifier: QuestionClassifier | None = None,
        translator: Translator | None = None,
        engine: AnswerEngine | None = None,
        translation_timeout: float = settings.TRANSLATION_TIMEOUT,
        answer_timeout: float = settings.ANSWER_TIMEOUT,
        dispatch_timeout: float = settings.DISPATCH_TIMEOUT,
    ):
        self.classifier = classifier or QuestionClassifier()
        self.translator = translator or Translator()
        self.engine = engine or AnswerEngine()
        self.translation_timeout = translation_timeout
        self.answer_timeout = answer_timeout
        self.dispatch_timeout = dispatch_timeout

    def is_question(self, text: str) -> bool:
        return self.classifier.is_question(text)

    async def translate(self, arabic: str) -> str:
        return await run_stage(
            "translate", self.translator.translate(arabic), self.translation_timeout
        )

    async def answer(self, question: str) -> str:
        return await run_stage("answer", self.engine.answer(question), self.answer_timeout)

    async def process(self, question: str) -> PipelineResult:
        """translate 后 answer（顺序执行）"""
        translated = await self.translate(question)
        answer = await self.answer(translated)
        return PipelineResult(question=question, translated_question=translated, answer=answer)

    async def ask(self, text: str) -> PipelineResult | None:
        """非问题返回 None"""
        if not self.is_question(text):
            return None
        return await self.process(text)

    async def dispatch(self, sink: DeviceSink, text: str) -> bool:
        """发送到设备；发送失败只记录日志，不重试"""
        delivered = await run_stage("dispatch", sink.send(text), self.dispatch_timeout)
        if not delivered:
            logger.warning(f"Dispatch to {sink.name} failed")
        return delivered
