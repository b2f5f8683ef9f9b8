"""
Question Classifier 测试
"""

import pytest

from quickanswer.services.classifier import QUESTION_MARKERS, QuestionClassifier, is_question


class TestQuestionClassifier:
    """QuestionClassifier 单元测试"""

    @pytest.fixture
    def classifier(self):
        return QuestionClassifier()

    @pytest.mark.parametrize("marker", QUESTION_MARKERS)
    def test_each_marker_is_detected(self, classifier, marker):
        """每个疑问词都能触发"""
        assert classifier.is_question(f"{marker} شيء") is True

    @pytest.mark.parametrize(
        "text",
        [
            "ما هذا؟",
            "أين المكتبة",
            "هل أنت روبوت؟",
            "لماذا يحدث هذا؟",
        ],
    )
    def test_questions(self, classifier, text):
        assert classifier.is_question(text)

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "شكرا جزيلا",
            "السلام عليكم",
            "hello world",
        ],
    )
    def test_non_questions(self, classifier, text):
        """不含任何疑问词时返回 False"""
        assert classifier.is_question(text) is False

    def test_marker_inside_another_word_matches(self, classifier):
        """子串匹配：嵌在其他词里的疑问词同样命中（"سهل" 含 "هل"）"""
        assert classifier.is_question("الامتحان سهل") is True

    def test_module_level_helper(self):
        assert is_question("كيف حالك") is True
        assert is_question("نعم") is False

    def test_custom_markers(self):
        classifier = QuestionClassifier(markers=("كم",))
        assert classifier.is_question("كم الساعة")
        assert not classifier.is_question("ما هذا")
