"""HTML 处理工具：懒加载图片、相对链接、CDATA 与实体转义."""

import logging
import re
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"
# 内容中的 ]]> 被拆成两段 CDATA 后的形式
CDATA_SPLIT = "]]]]><![CDATA[>"

# 懒加载属性（按优先级排列）
LAZY_IMAGE_ATTRS = (
    "data-src",
    "data-original",
    "data-url",
    "data-image",
    "data-lazy-src",
    "data-lazy",
    "data-lazysrc",
    "data-original-src",
    "data-echo",
    "data-actualsrc",
    "data-real-src",
    "data-img-src",
    "data-defer-src",
    "data-hi-res-src",
)

PLACEHOLDER_MARKERS = ("placeholder", "loading", "spacer", "blank")

_LEADING_CDATA = re.compile(r"^\s*<!\[CDATA\[")
_TRAILING_CDATA = re.compile(r"\]\]>\s*$")
_SRCSET_URL = re.compile(r"(https?://[^\s,]+)")
_NOSCRIPT_SRC = re.compile(r"""src=["']([^"']+)["']""")
# XML 1.0 不允许出现的控制字符
_INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def absolutize_url(url: str, base_url: str) -> str:
    """
    将相对链接解析为绝对链接.

    已经以 http 开头的链接原样返回；``//`` 开头的协议相对链接沿用 base 的协议。
    """
    if not url or url.startswith("http") or not base_url:
        return url
    try:
        return urljoin(base_url, url)
    except ValueError:
        logger.warning(f"无法解析相对链接: {url} (base={base_url})")
        return url


def unescape_html(text: str) -> str:
    """
    反转义 HTML 实体，最多 3 轮.

    部分订阅源会把内容转义两到三次，逐轮还原直到不再变化。
    """
    if not text:
        return ""

    current = text
    for _ in range(3):
        if "&lt;" not in current and "&gt;" not in current and "&amp;" not in current:
            break

        unescaped = (
            current.replace("&lt;", "<")
            .replace("&gt;", ">")
            .replace("&quot;", '"')
            .replace("&apos;", "'")
            .replace("&amp;", "&")
        )
        if unescaped == current:
            break
        current = unescaped

    return current


def strip_cdata_wrapper(text: str) -> str:
    """去掉首尾的 CDATA 标记."""
    if not text:
        return ""
    return _TRAILING_CDATA.sub("", _LEADING_CDATA.sub("", text))


def is_cdata_wrapped(text: str) -> bool:
    """是否已被 CDATA 包裹."""
    stripped = text.strip()
    return stripped.startswith(CDATA_OPEN) and stripped.endswith(CDATA_CLOSE)


def strip_invalid_xml_chars(text: str) -> str:
    """去掉 XML 1.0 中非法的控制字符（保留制表、换行、回车）."""
    return _INVALID_XML_CHARS.sub("", text)


def wrap_cdata(text: str) -> str:
    """用 CDATA 包裹文本，内部的 ``]]>`` 会被拆开."""
    sanitized = strip_invalid_xml_chars(text).replace(CDATA_CLOSE, CDATA_SPLIT)
    return f"{CDATA_OPEN}{sanitized}{CDATA_CLOSE}"


def inner_html(tag: Tag) -> str:
    """元素内部 HTML."""
    return tag.decode_contents()


def _lazy_image_source(img: Tag) -> str | None:
    """从懒加载属性、srcset 或 noscript 中找出真实图片地址."""
    for attr in LAZY_IMAGE_ATTRS:
        value = img.get(attr)
        if isinstance(value, str) and (value.startswith("http") or value.startswith("//")):
            data_srcset = img.get("data-srcset")
            if data_srcset:
                img["srcset"] = data_srcset
            return f"https:{value}" if value.startswith("//") else value

    srcset = img.get("srcset") or img.get("data-srcset")
    if isinstance(srcset, str):
        match = _SRCSET_URL.search(srcset)
        if match:
            return match.group(1)

    # 部分站点把真实图片放在 noscript 里
    parent = img.parent
    noscript = parent.find_next_sibling("noscript") if parent else None
    if noscript:
        match = _NOSCRIPT_SRC.search(noscript.decode_contents())
        if match:
            return match.group(1)

    return None


def fix_lazy_images(root: Tag) -> None:
    """把懒加载图片的占位 src 替换成真实地址."""
    for img in root.find_all("img"):
        src = img.get("src") or ""
        if (
            isinstance(src, str)
            and src.startswith("http")
            and not any(marker in src for marker in PLACEHOLDER_MARKERS)
        ):
            continue

        real_src = _lazy_image_source(img)
        if real_src:
            img["src"] = real_src


def fix_relative_urls(root: Tag, base_url: str) -> None:
    """把 href、src、srcset 中的相对链接改为绝对链接."""
    parsed = urlparse(base_url or "")
    if not parsed.scheme or not parsed.netloc:
        logger.warning(f"无效的 base URL，跳过相对链接修正: {base_url}")
        return

    for anchor in root.find_all("a", href=True):
        href = anchor["href"]
        if not href.startswith(("http", "javascript:", "#", "mailto:")):
            anchor["href"] = urljoin(base_url, href)

    for element in root.find_all(src=True):
        src = element["src"]
        if not src.startswith(("http", "data:", "//")):
            element["src"] = urljoin(base_url, src)

    for element in root.find_all(srcset=True):
        parts = []
        for part in element["srcset"].split(","):
            pieces = part.strip().split()
            if not pieces:
                continue
            url = pieces[0]
            if not url.startswith("http"):
                url = urljoin(base_url, url)
            parts.append(" ".join([url, *pieces[1:]]))
        element["srcset"] = ", ".join(parts)


def extract_content(html: str, selector: str, base_url: str = "") -> str:
    """
    从页面中提取选择器对应的内容 HTML.

    Args:
        html: 页面 HTML
        selector: CSS 选择器
        base_url: 用于修正相对链接

    Returns:
        内容 HTML；多个匹配用 ``<br/>`` 连接，找不到时为空串
    """
    soup = BeautifulSoup(html, "lxml")
    elements = soup.select(selector)
    if not elements:
        return ""

    for element in elements:
        fix_lazy_images(element)
        if base_url:
            fix_relative_urls(element, base_url)

    if len(elements) > 1:
        return "<br/>".join(inner_html(element) for element in elements)

    element = elements[0]
    return inner_html(element) or element.get_text()
