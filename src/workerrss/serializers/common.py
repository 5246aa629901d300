"""序列化共享工具."""

import re
from xml.sax.saxutils import escape

from workerrss.utils.html_parser import (
    CDATA_CLOSE,
    CDATA_SPLIT,
    is_cdata_wrapped,
    strip_cdata_wrapper,
    strip_invalid_xml_chars,
    wrap_cdata,
)

# 缺失字段的占位文本
PLACEHOLDER = "无"
DEFAULT_CHANNEL_TITLE = "Feed"

SUMMARY_LENGTH = 200

_FIRST_CDATA = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.S)


def escape_xml(value: object) -> str:
    """转义 XML 文本与属性值，并去掉非法控制字符."""
    if value is None:
        return ""
    text = strip_invalid_xml_chars(str(value))
    return escape(text, {'"': "&quot;", "'": "&apos;"})


def or_placeholder(value: str | None) -> str:
    return value if value else PLACEHOLDER


def as_cdata(html: str) -> str:
    """已包裹 CDATA 的内容原样返回，其余内容包裹后返回."""
    if is_cdata_wrapped(html):
        return strip_invalid_xml_chars(html.strip())
    return wrap_cdata(html)


def content_html(description: str) -> str:
    """去掉 CDATA 标记后的 HTML，被拆开的 ``]]>`` 还原."""
    return strip_cdata_wrapper(description or "").replace(CDATA_SPLIT, CDATA_CLOSE)


def truncate_utf16(text: str, length: int = SUMMARY_LENGTH) -> str:
    """按 UTF-16 码元截断，避免截出半个代理对."""
    encoded = text.encode("utf-16-le")
    if len(encoded) <= length * 2:
        return text
    return encoded[: length * 2].decode("utf-16-le", errors="ignore")


def summarize(description: str) -> str:
    """摘要：去掉第一段 CDATA 标记，再截断到 200 个 UTF-16 码元."""
    if not description:
        return ""
    text = _FIRST_CDATA.sub(r"\1", description, count=1)
    return truncate_utf16(text)
