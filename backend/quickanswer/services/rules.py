"""
Rule Engine
有序规则链 - 精确匹配表 + 按优先级排列的回退规则（先匹配者胜出）

规则以数据形式表达，而不是嵌套 if/else：
每条规则是 (predicate, transform) 对，RuleChain 依次求值，
第一个 predicate 为真的规则决定输出，其余规则不再参与。
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class Rule:
    """单条回退规则"""

    name: str
    predicate: Callable[[str], bool]
    transform: Callable[[str], str]

    def matches(self, text: str) -> bool:
        return self.predicate(text)

    def apply(self, text: str) -> str:
        return self.transform(text)


@dataclass(frozen=True)
class RuleMatch:
    """规则命中结果（用于日志和逐条测试）"""

    rule: str
    output: str


class RuleChain:
    """按顺序求值的规则链，第一个命中的规则胜出"""

    def __init__(self, rules: Iterable[Rule]):
        self.rules: tuple[Rule, ...] = tuple(rules)
        names = [rule.name for rule in self.rules]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate rule names: {names}")

    def __iter__(self):
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def get(self, name: str) -> Rule:
        for rule in self.rules:
            if rule.name == name:
                return rule
        raise KeyError(name)

    def first_match(self, text: str) -> Rule | None:
        for rule in self.rules:
            if rule.matches(text):
                return rule
        return None

    def evaluate(self, text: str) -> RuleMatch | None:
        rule = self.first_match(text)
        if rule is None:
            return None
        return RuleMatch(rule=rule.name, output=rule.apply(text))


class PhraseTable:
    """双向短语表

    正向: 源短语 -> 目标短语（每个 key 独立，不做归一化）
    反向: 目标短语 -> 第一次登记的源短语
    """

    def __init__(self, entries: Mapping[str, str] | Iterable[tuple[str, str]]):
        items = entries.items() if isinstance(entries, Mapping) else entries
        self._forward: dict[str, str] = {}
        self._reverse: dict[str, str] = {}
        for source, target in items:
            self._forward[source] = target
            self._reverse.setdefault(target, source)

    def __contains__(self, source: object) -> bool:
        return source in self._forward

    def __len__(self) -> int:
        return len(self._forward)

    def keys(self):
        return self._forward.keys()

    def lookup(self, source: str) -> str | None:
        return self._forward.get(source)

    def reverse_lookup(self, target: str) -> str | None:
        return self._reverse.get(target)


# ========== 提取辅助函数 ==========


def contains_any(*markers: str, lower: bool = False) -> Callable[[str], bool]:
    """构造子串匹配的 predicate（不考虑词边界）"""

    def predicate(text: str) -> bool:
        haystack = text.lower() if lower else text
        return any(marker in haystack for marker in markers)

    return predicate


def remove_first(text: str, token: str, ignore_case: bool = False) -> str:
    """删除 token 的第一次出现"""
    if not token:
        return text
    flags = re.IGNORECASE if ignore_case else 0
    return re.sub(re.escape(token), "", text, count=1, flags=flags)


def strip_markers(text: str, markers: Iterable[str], ignore_case: bool = False) -> str:
    """依次删除每个出现的 marker（各自第一次出现），不做其他归一化"""
    for marker in markers:
        haystack, needle = (text.lower(), marker.lower()) if ignore_case else (text, marker)
        if needle in haystack:
            text = remove_first(text, marker, ignore_case=ignore_case)
    return text
