"""条目过滤规则."""

import logging
import re
from dataclasses import dataclass

from workerrss.models.item import FeedItem
from workerrss.models.pipeline import FilterRule

logger = logging.getLogger(__name__)


@dataclass
class _CompiledRule:
    field: str
    mode: str
    needle: str
    pattern: re.Pattern[str] | None = None

    def matches(self, text: str) -> bool:
        if self.pattern is not None:
            return self.pattern.search(text) is not None
        return self.needle in text.lower()


def _compile(rules: list[FilterRule]) -> list[_CompiledRule]:
    """预编译启用的规则，非法正则跳过."""
    compiled: list[_CompiledRule] = []
    for rule in rules:
        if not rule.active:
            continue
        if rule.type == "regex":
            try:
                pattern = re.compile(rule.value, re.IGNORECASE)
            except re.error as e:
                logger.warning(f"过滤规则正则无效，已跳过: {rule.value!r} ({e})")
                continue
            compiled.append(_CompiledRule(rule.field, rule.mode, rule.value, pattern))
        else:
            compiled.append(_CompiledRule(rule.field, rule.mode, rule.value.lower()))
    return compiled


def _keep(item: FeedItem, rules: list[_CompiledRule]) -> bool:
    has_include = False
    include_matched = False

    for rule in rules:
        matched = rule.matches(item.field_text(rule.field))
        if rule.mode == "exclude":
            if matched:
                return False
        elif rule.mode == "include":
            has_include = True
            include_matched = include_matched or matched

    return include_matched or not has_include


def apply_filters(items: list[FeedItem], rules: list[FilterRule]) -> list[FeedItem]:
    """
    按规则过滤条目.

    命中任一排除规则即丢弃；存在包含规则时至少命中一条才保留。
    未知 mode 的规则只参与匹配，不影响结果。
    """
    if not items or not rules:
        return items

    compiled = _compile(rules)
    if not compiled:
        return items

    kept = [item for item in items if _keep(item, compiled)]
    if len(kept) != len(items):
        logger.info(f"过滤规则移除了 {len(items) - len(kept)} 个条目")
    return kept
