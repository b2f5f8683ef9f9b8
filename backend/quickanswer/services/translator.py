"""
Translator
阿拉伯语问题 -> 英语问题（规则翻译，非机器翻译）

优先级:
1. 精确匹配短语表（带 / 不带 "؟" 两种形式均为独立 key）
2. 疑问词提取规则（按顺序，先匹配者胜出）
3. 兜底: "Please explain about: {原文}"
"""

from __future__ import annotations

import asyncio

from loguru import logger

from quickanswer.core.config import settings
from quickanswer.services.rules import (
    PhraseTable,
    Rule,
    RuleChain,
    contains_any,
    strip_markers,
)

ARABIC_QUESTION_MARK = "؟"

# 常见问题（带问号形式），表中同时登记去掉问号的形式
KNOWN_PHRASES: tuple[tuple[str, str], ...] = (
    ("ما هذا؟", "What is this?"),
    ("من هذا؟", "Who is this?"),
    ("أين أنا؟", "Where am I?"),
    ("كيف أفعل هذا؟", "How do I do this?"),
    ("متى يحدث هذا؟", "When does this happen?"),
    ("لماذا يحدث هذا؟", "Why does this happen?"),
    ("ما الوقت الآن؟", "What time is it?"),
    ("ما هي سرعة الضوء؟", "What is the speed of light?"),
    ("ما اسمك؟", "What is your name?"),
    ("ما هي عاصمة فرنسا؟", "What is the capital of France?"),
    ("كيف حالك؟", "How are you?"),
    ("هل أنت روبوت؟", "Are you a robot?"),
    ("ماذا تفعل؟", "What are you doing?"),
)


def _build_phrase_entries(phrases: tuple[tuple[str, str], ...]) -> list[tuple[str, str]]:
    entries: list[tuple[str, str]] = []
    for arabic, english in phrases:
        entries.append((arabic, english))
        bare = arabic.rstrip(ARABIC_QUESTION_MARK).strip()
        if bare != arabic:
            entries.append((bare, english))
    return entries


PHRASE_TABLE = PhraseTable(_build_phrase_entries(KNOWN_PHRASES))


def extract_remainder(text: str, markers: tuple[str, ...]) -> str:
    """去掉规则中出现的每个疑问词（各自第一次出现）和所有 "؟"，不做其它归一化"""
    return strip_markers(text, markers).replace(ARABIC_QUESTION_MARK, "").strip()


def _pattern_rule(name: str, markers: tuple[str, ...], template: str) -> Rule:
    return Rule(
        name=name,
        predicate=contains_any(*markers),
        transform=lambda text: template.format(extract_remainder(text, markers)),
    )


TRANSLATION_RULES = RuleChain(
    [
        _pattern_rule("what_is", ("ما هي", "ما هو"), "What is {}?"),
        _pattern_rule("who_is", ("من هو", "من هي"), "Who is {}?"),
        _pattern_rule("where", ("أين",), "Where is {}?"),
        _pattern_rule("how", ("كيف",), "How {}?"),
        _pattern_rule("when", ("متى",), "When {}?"),
        _pattern_rule("why", ("لماذا",), "Why {}?"),
        _pattern_rule("yes_no", ("هل",), "Is {}?"),
        _pattern_rule("what", ("ماذا",), "What {}?"),
    ]
)

FALLBACK_TEMPLATE = "Please explain about: {}"


class Translator:
    """规则翻译器

    Attributes:
        phrases: 精确匹配短语表
        rules: 回退提取规则链
        latency: 模拟网络延迟（秒）
    """

    def __init__(
        self,
        phrases: PhraseTable = PHRASE_TABLE,
        rules: RuleChain = TRANSLATION_RULES,
        latency: float | None = None,
    ):
        self.phrases = phrases
        self.rules = rules
        self.latency = settings.TRANSLATION_LATENCY if latency is None else latency

    def translate_text(self, arabic: str) -> str:
        """同步纯函数版本（无延迟）"""
        text = arabic.strip()

        exact = self.phrases.lookup(text)
        if exact is not None:
            logger.debug(f"Translation exact match: {text!r}")
            return exact

        match = self.rules.evaluate(text)
        if match is not None:
            logger.debug(f"Translation rule '{match.rule}' matched: {text!r}")
            return match.output

        logger.debug(f"Translation fallback: {text!r}")
        return FALLBACK_TEMPLATE.format(text)

    async def translate(self, arabic: str) -> str:
        if self.latency:
            await asyncio.sleep(self.latency)
        return self.translate_text(arabic)

    def to_arabic(self, english: str) -> str | None:
        """反向查表（仅限已知短语）"""
        return self.phrases.reverse_lookup(english)
