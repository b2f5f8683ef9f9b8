"""
Question Classifier
判断阿拉伯语转录文本是否为问题
"""

from __future__ import annotations

# 阿拉伯语疑问词：what, who, where, how, when, why, yes/no, what (verbal)
QUESTION_MARKERS: tuple[str, ...] = ("ما", "من", "أين", "كيف", "متى", "لماذا", "هل", "ماذا")


class QuestionClassifier:
    """子串匹配疑问词（非词边界匹配，嵌在其他词中的疑问词同样命中）"""

    def __init__(self, markers: tuple[str, ...] = QUESTION_MARKERS):
        self.markers = markers

    def is_question(self, text: str) -> bool:
        if not text:
            return False
        return any(marker in text for marker in self.markers)


def is_question(text: str) -> bool:
    """使用默认疑问词集合判断"""
    return QuestionClassifier().is_question(text)
