"""JSON / XML 路径模板抽取."""

import json
import logging
from datetime import UTC, datetime
from typing import Any

from workerrss.extraction.common import Extraction, ExtractionError, build_item
from workerrss.extraction.dates import (
    format_rfc2822,
    from_timestamp,
    guess_timestamp_unit,
    normalize_pub_date,
)
from workerrss.extraction.normalizer import parse_markup
from workerrss.extraction.paths import interpolate, resolve, to_text, unwrap_text_node
from workerrss.models.item import Channel, FeedItem
from workerrss.models.source import FeedSourceConfig, JsonSourceConfig

logger = logging.getLogger(__name__)


def _as_list(value: Any) -> list[Any]:
    """把解析出的条目集合统一为列表."""
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        return [value]
    return []


def _json_item_list(data: Any, item_selector: str) -> list[Any]:
    entries = resolve(data, item_selector) if item_selector else data
    # 路径指向的是 JSON 字符串时再解析一次
    if isinstance(entries, str) and entries:
        try:
            entries = json.loads(entries)
        except json.JSONDecodeError:
            logger.warning(f"条目路径 {item_selector} 指向的字符串不是合法 JSON")
            return []
    return entries if isinstance(entries, list) else []


def _raw_date_value(entry: Any, selector: str) -> Any:
    """模板返回字符串，单一路径保留原始类型（数字时间戳需要区分）."""
    if "{" in selector and "}" in selector:
        return interpolate(entry, selector)
    return unwrap_text_node(resolve(entry, selector))


def _json_pub_date(entry: Any, config: JsonSourceConfig, now: datetime) -> str:
    if not config.date_selector:
        return format_rfc2822(now)

    raw = _raw_date_value(entry, config.date_selector)
    is_number = isinstance(raw, int | float) and not isinstance(raw, bool)
    is_digits = isinstance(raw, str) and raw.strip().isdigit()

    parsed = None
    if config.timestamp_mode and (is_number or is_digits):
        parsed = from_timestamp(raw, config.timestamp_unit)
    elif is_number:
        parsed = from_timestamp(raw, guess_timestamp_unit(float(raw)))

    if parsed is not None:
        return format_rfc2822(parsed)
    return normalize_pub_date(to_text(raw), now=now)


def extract_json(
    document: str | Any,
    config: JsonSourceConfig,
    base_url: str,
    key: str | None = None,
) -> Extraction:
    """
    按路径模板从 JSON 中抽取条目.

    ``reverse_order`` 在截断之前生效。
    """
    if isinstance(document, str | bytes):
        try:
            data = json.loads(document)
        except json.JSONDecodeError as e:
            msg = f"JSON 解析失败: {e}"
            raise ExtractionError(msg) from e
    else:
        data = document

    entries = _json_item_list(data, config.item_selector)
    if config.reverse_order:
        entries = list(reversed(entries))
    entries = entries[: config.max_items]

    link_base = base_url
    if config.link_need_join and config.link_base_url:
        link_base = config.link_base_url

    now = datetime.now(UTC)
    items: list[FeedItem] = []
    for entry in entries:
        item = build_item(
            title=interpolate(entry, config.title_selector),
            link=interpolate(entry, config.link_selector),
            description=interpolate(entry, config.desc_selector),
            pub_date=_json_pub_date(entry, config, now),
            base_url=link_base,
            source_url=config.url,
        )
        if item is not None:
            items.append(item)

    channel = Channel(
        title=config.channel_title or key or "Custom JSON Feed",
        link=config.url,
        description=config.channel_desc or f"Generated from {config.url}",
    )
    return Extraction(items=items, channel=channel)


def extract_xml(
    document: str,
    config: FeedSourceConfig,
    base_url: str,
    key: str | None = None,
) -> Extraction:
    """规范化 XML 后按路径模板抽取条目."""
    tree = parse_markup(document)
    if not tree:
        msg = "XML 文档为空或无法解析"
        raise ExtractionError(msg)

    entries = _as_list(resolve(tree, config.item_selector))[: config.max_items]
    logger.info(f"路径 {config.item_selector} 解析出 {len(entries)} 个条目")

    now = datetime.now(UTC)
    items: list[FeedItem] = []
    for entry in entries:
        guid = ""
        if isinstance(entry, dict):
            guid = to_text(unwrap_text_node(entry.get("guid")))

        item = build_item(
            title=interpolate(entry, config.title_selector),
            link=interpolate(entry, config.link_selector),
            description=interpolate(entry, config.desc_selector),
            pub_date=normalize_pub_date(interpolate(entry, config.date_selector), now=now),
            guid=guid,
            base_url=base_url,
            source_url=config.url,
        )
        if item is not None:
            items.append(item)

    channel = Channel(
        title=config.channel_title or key or "Custom XML Feed",
        link=config.url,
        description=config.channel_desc or key or config.url,
    )
    return Extraction(items=items, channel=channel)
