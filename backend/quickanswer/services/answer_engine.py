"""
Answer Engine
英语问题 -> 回答（规则查表 + 启发式回退，非真实 AI）

优先级:
1. 精确匹配问答表（区分大小写，标点须一致）；"What time is it?" 为动态条目
2. 启发式规则（在小写文本上判断，先匹配者胜出）
3. 通用模板（原样嵌入问题）
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime

from loguru import logger

from quickanswer.core.config import settings
from quickanswer.services.rules import Rule, RuleChain, contains_any, strip_markers

TIME_QUESTION = "What time is it?"

STATIC_ANSWERS: dict[str, str] = {
    "What is this?": (
        "This appears to be an object you are looking at. "
        "I would need more context to provide a specific answer."
    ),
    "Who is this?": (
        "This is a person in your field of view. "
        "I cannot identify specific individuals for privacy reasons."
    ),
    "Where am I?": (
        "You appear to be in an indoor/outdoor location. "
        "For specific location details, please check your GPS."
    ),
    "How do I do this?": (
        "To complete this task, follow the standard procedure "
        "or consult the relevant documentation."
    ),
    "When does this happen?": "The timing depends on the specific context of what you are referring to.",
    "Why does this happen?": (
        "This occurs due to various factors that would need more context to explain specifically."
    ),
    "What is the speed of light?": (
        "The speed of light in a vacuum is exactly 299,792,458 meters per second "
        "(about 300,000 km/s)."
    ),
    "What is your name?": "I am Quick Answer, your voice question assistant.",
    "What is the capital of France?": "The capital of France is Paris.",
    "How are you?": "I'm doing well, thank you for asking. What would you like to know?",
    "Are you a robot?": "I am a software assistant running on your device, not a physical robot.",
    "What are you doing?": "I'm listening for your questions and sending the answers to your glasses.",
}

GENERIC_TEMPLATE = (
    'I need more information to provide a helpful answer to "{}". '
    "Could you rephrase or add some details?"
)


def extract_phrase(question: str, keywords: tuple[str, ...]) -> str:
    """去掉命中的关键词（忽略大小写，第一次出现）和末尾 "?"，再 trim"""
    text = strip_markers(question, keywords, ignore_case=True)
    return text.strip().rstrip("?").strip()


def _heuristic(name: str, keywords: tuple[str, ...], template: str, strip: tuple[str, ...] = ()) -> Rule:
    return Rule(
        name=name,
        predicate=contains_any(*keywords, lower=True),
        transform=lambda question: template.format(phrase=extract_phrase(question, strip + keywords)),
    )


ANSWER_RULES = RuleChain(
    [
        _heuristic(
            "what",
            ("what is", "what are"),
            "I'd be happy to explain {phrase}. "
            "Could you tell me a bit more about which aspect of {phrase} you are interested in?",
            strip=("please explain about: ",),
        ),
        _heuristic(
            "who",
            ("who is", "who are"),
            "I cannot identify specific people for privacy reasons, "
            "but if you share more about {phrase}, I can help with general information.",
        ),
        _heuristic(
            "where",
            ("where is", "where are"),
            "To find {phrase}, check the map or GPS on your phone for directions.",
        ),
        _heuristic(
            "how",
            ("how",),
            "To work out how {phrase}, follow the standard steps for that task "
            "or consult the relevant guide or documentation.",
        ),
        _heuristic(
            "when",
            ("when",),
            "The timing of \"{phrase}\" depends on the specific context. "
            "Check a schedule or calendar for exact dates.",
        ),
        _heuristic(
            "why",
            ("why",),
            "There can be several reasons behind \"{phrase}\". "
            "More context would help me give a specific explanation.",
        ),
        _heuristic(
            "yes_no",
            ("is ",),
            "I can't confirm \"{phrase}\" without more details. Could you clarify your question?",
        ),
    ]
)


class AnswerEngine:
    """规则回答引擎

    Attributes:
        answers: 静态问答表
        rules: 启发式回退规则链
        clock: 当前时间来源（动态时间条目使用）
        latency: 模拟网络延迟（秒）
    """

    def __init__(
        self,
        answers: dict[str, str] | None = None,
        rules: RuleChain = ANSWER_RULES,
        clock: Callable[[], datetime] = datetime.now,
        latency: float | None = None,
    ):
        self.answers = dict(STATIC_ANSWERS if answers is None else answers)
        self.rules = rules
        self.clock = clock
        self.latency = settings.ANSWER_LATENCY if latency is None else latency

    def current_time_answer(self) -> str:
        return f"The current time is {self.clock().strftime('%X')}."

    def lookup(self, question: str) -> str | None:
        """精确匹配（含动态时间条目）"""
        if question == TIME_QUESTION:
            return self.current_time_answer()
        return self.answers.get(question)

    def answer_text(self, question: str) -> str:
        exact = self.lookup(question)
        if exact is not None:
            logger.debug(f"Answer exact match: {question!r}")
            return exact

        match = self.rules.evaluate(question)
        if match is not None:
            logger.debug(f"Answer heuristic '{match.rule}' matched: {question!r}")
            return match.output

        logger.debug(f"Answer fallback: {question!r}")
        return GENERIC_TEMPLATE.format(question)

    async def answer(self, question: str) -> str:
        if self.latency:
            await asyncio.sleep(self.latency)
        return self.answer_text(question)
