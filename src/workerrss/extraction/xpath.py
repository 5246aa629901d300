"""网页 XPath 抽取."""

import logging
from datetime import UTC, datetime

import lxml.html
from lxml import etree

from workerrss.extraction.common import Extraction, ExtractionError, build_item
from workerrss.extraction.dates import format_rfc2822, from_timestamp, normalize_pub_date
from workerrss.models.item import Channel, FeedItem
from workerrss.models.source import XpathSourceConfig
from workerrss.utils.html_parser import wrap_cdata

logger = logging.getLogger(__name__)


def _relative(path: str) -> str:
    """不以 ``.`` 或 ``/`` 开头的表达式补上 ``./``."""
    if path.startswith((".", "/")):
        return path
    return f"./{path}"


def _compile(path: str) -> etree.XPath | None:
    if not path:
        return None
    try:
        return etree.XPath(_relative(path))
    except etree.XPathSyntaxError as e:
        msg = f"XPath 表达式无效: {path} ({e})"
        raise ExtractionError(msg) from e


def _first(xpath: etree.XPath | None, node: lxml.html.HtmlElement) -> object:
    """求值并取第一个结果，没有结果时返回 None."""
    if xpath is None:
        return None
    try:
        result = xpath(node)
    except etree.XPathEvalError as e:
        logger.warning(f"XPath {xpath.path} 求值失败: {e}")
        return None
    if isinstance(result, list):
        return result[0] if result else None
    return result


def _string_value(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, lxml.html.HtmlElement):
        return value.text_content().strip()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _link_value(value: object) -> str:
    """元素节点优先取 href，其次为文本."""
    if isinstance(value, lxml.html.HtmlElement):
        return (value.get("href") or value.text_content()).strip()
    return _string_value(value)


def _description_value(value: object) -> str:
    if not isinstance(value, lxml.html.HtmlElement):
        return _string_value(value)
    inner = (value.text or "") + "".join(
        lxml.html.tostring(child, encoding="unicode") for child in value
    )
    content = inner if inner.strip() else value.text_content()
    return wrap_cdata(content) if content.strip() else ""


def _pub_date(text: str, config: XpathSourceConfig, now: datetime) -> str:
    if not text:
        return format_rfc2822(now)
    if config.timestamp_mode and text.isdigit():
        parsed = from_timestamp(text, config.timestamp_unit)
        if parsed is not None:
            return format_rfc2822(parsed)
    return normalize_pub_date(text, now=now)


def _parse_document(document: str) -> lxml.html.HtmlElement:
    try:
        return lxml.html.fromstring(document)
    except ValueError:
        # 带编码声明的文本只能按字节解析
        return lxml.html.fromstring(document.encode("utf-8"))


def extract_xpath(
    document: str,
    config: XpathSourceConfig,
    base_url: str,
    key: str | None = None,
) -> Extraction:
    """
    按 XPath 表达式从网页中抽取条目.

    ``item_selector`` 在整个文档上求值，其余字段表达式相对于每个条目节点求值，
    不以 ``.`` 或 ``/`` 开头的表达式会补上 ``./``。
    """
    if not config.item_selector:
        msg = "配置缺少条目表达式 (itemSelector)"
        raise ExtractionError(msg)
    if not document.strip():
        msg = "网页内容为空"
        raise ExtractionError(msg)

    try:
        root = _parse_document(document)
    except etree.LxmlError as e:
        msg = f"网页解析失败: {e}"
        raise ExtractionError(msg) from e

    try:
        nodes = root.xpath(config.item_selector)
    except etree.XPathError as e:
        msg = f"XPath 表达式无效: {config.item_selector} ({e})"
        raise ExtractionError(msg) from e
    if not isinstance(nodes, list):
        nodes = []
    nodes = [node for node in nodes if isinstance(node, lxml.html.HtmlElement)]
    logger.info(f"XPath {config.item_selector} 匹配到 {len(nodes)} 个节点")

    title_path = _compile(config.title_selector)
    link_path = _compile(config.link_selector)
    desc_path = _compile(config.desc_selector)
    date_path = _compile(config.date_selector)

    link_base = base_url
    if config.link_need_join and config.link_base_url:
        link_base = config.link_base_url

    now = datetime.now(UTC)
    items: list[FeedItem] = []
    for node in nodes[: config.max_items]:
        item = build_item(
            title=_string_value(_first(title_path, node)),
            link=_link_value(_first(link_path, node)),
            description=_description_value(_first(desc_path, node)),
            pub_date=_pub_date(_string_value(_first(date_path, node)), config, now),
            base_url=link_base,
            source_url=config.url,
        )
        if item is not None:
            items.append(item)

    channel = Channel(
        title=config.channel_title or key or "Custom XPath Feed",
        link=config.url,
        description=config.channel_desc or f"Generated from {config.url}",
    )
    return Extraction(items=items, channel=channel)
