"""
Translator 测试
精确匹配 -> 提取规则 -> 兜底
"""

import time

import pytest

from quickanswer.services.translator import (
    KNOWN_PHRASES,
    PHRASE_TABLE,
    TRANSLATION_RULES,
    Translator,
    extract_remainder,
)


class TestExactMatch:
    """精确匹配短语表"""

    def test_with_and_without_question_mark(self, translator):
        """两种形式都是独立 key，结果相同"""
        assert translator.translate_text("ما هذا؟") == "What is this?"
        assert translator.translate_text("ما هذا") == "What is this?"

    def test_both_forms_registered_for_every_phrase(self):
        for arabic, english in KNOWN_PHRASES:
            assert PHRASE_TABLE.lookup(arabic) == english
            assert PHRASE_TABLE.lookup(arabic.rstrip("؟")) == english

    def test_input_is_trimmed(self, translator):
        assert translator.translate_text("  أين أنا؟  ") == "Where am I?"

    def test_exact_match_beats_rules(self, translator):
        """"ما هي سرعة الضوء" 不走 what_is 规则"""
        assert translator.translate_text("ما هي سرعة الضوء؟") == "What is the speed of light?"

    def test_reverse_lookup(self, translator):
        assert translator.to_arabic("Who is this?") == "من هذا؟"
        assert translator.to_arabic("Unknown") is None


class TestPatternRules:
    """提取规则（按顺序，先匹配者胜出）"""

    @pytest.mark.parametrize(
        "arabic, expected",
        [
            ("ما هي الشمس؟", "What is الشمس?"),
            ("ما هو الحب", "What is الحب?"),
            ("من هو المدير؟", "Who is المدير?"),
            ("من هي المعلمة؟", "Who is المعلمة?"),
            ("أين المكتبة؟", "Where is المكتبة?"),
            ("كيف أطبخ الأرز؟", "How أطبخ الأرز?"),
            ("متى يفتح المتجر؟", "When يفتح المتجر?"),
            ("لماذا السماء زرقاء؟", "Why السماء زرقاء?"),
            ("هل الجو بارد؟", "Is الجو بارد?"),
        ],
    )
    def test_each_rule(self, translator, arabic, expected):
        assert translator.translate_text(arabic) == expected

    def test_rule_order(self):
        assert [rule.name for rule in TRANSLATION_RULES] == [
            "what_is",
            "who_is",
            "where",
            "how",
            "when",
            "why",
            "yes_no",
            "what",
        ]

    def test_what_rule_reachable(self):
        """"ماذا" 规则在链中可单独求值"""
        rule = TRANSLATION_RULES.get("what")
        assert rule.matches("ماذا تريد؟")
        assert rule.apply("ماذا تريد؟") == "What تريد?"

    def test_earlier_rule_wins_when_two_markers_present(self, translator):
        """同时含 "أين" 和 "كيف" 时，where 规则先命中（删除标记后的双空格保留）"""
        assert translator.translate_text("كيف أصل أين المحطة؟") == "Where is كيف أصل  المحطة?"

    def test_substring_marker_is_removed_once(self):
        """只删除第一次出现的疑问词，不做其他归一化"""
        assert extract_remainder("أين أين؟", ("أين",)) == "أين"

    def test_both_what_is_markers_removed(self, translator):
        """"ما هي" 和 "ما هو" 同时出现时都被删除"""
        assert translator.translate_text("ما هي القطة وما هو الكلب؟") == "What is القطة و الكلب?"

    def test_all_question_marks_removed(self):
        assert extract_remainder("أين المكتبة؟؟", ("أين",)) == "المكتبة"


class TestFallback:
    def test_no_marker_no_table_hit(self, translator):
        assert translator.translate_text("xyz") == "Please explain about: xyz"

    def test_fallback_uses_trimmed_input(self, translator):
        assert translator.translate_text("  شكرا  ") == "Please explain about: شكرا"


class TestAsyncTranslate:
    async def test_translate_matches_sync_version(self, translator):
        assert await translator.translate("أين المكتبة؟") == "Where is المكتبة?"

    async def test_translate_is_idempotent(self, translator):
        first = await translator.translate("متى يفتح المتجر؟")
        second = await translator.translate("متى يفتح المتجر؟")
        assert first == second

    async def test_latency_is_applied(self):
        translator = Translator(latency=0.05)
        start = time.monotonic()
        await translator.translate("ما هذا؟")
        assert time.monotonic() - start >= 0.04
