"""网页 CSS 选择器抽取."""

import logging
from datetime import UTC, datetime

from bs4 import BeautifulSoup, Tag

from workerrss.extraction.common import (
    Extraction,
    ExtractionError,
    build_item,
    image_enclosure,
)
from workerrss.extraction.dates import normalize_pub_date
from workerrss.models.item import Channel, FeedItem
from workerrss.models.source import HtmlSourceConfig, SelectorMap
from workerrss.utils.html_parser import inner_html, wrap_cdata

logger = logging.getLogger(__name__)

TITLE_FALLBACK_LENGTH = 50


def _attr_value(element: Tag, name: str) -> str:
    value = element.get(name)
    if isinstance(value, list):
        return " ".join(value)
    return (value or "").strip()


def _select_text(
    container: Tag,
    selector: str | None,
    attr: str | None,
    default_attr: str | None = None,
) -> str:
    """取子元素的属性（优先）或文本."""
    if not selector:
        return ""
    element = container.select_one(selector)
    if element is None:
        return ""
    if attr or default_attr:
        return _attr_value(element, attr or default_attr)
    return element.get_text().strip()


def _select_description(container: Tag, selectors: SelectorMap) -> str:
    if not selectors.description:
        return ""
    element = container.select_one(selectors.description)
    if element is None:
        return ""
    if selectors.description_attr:
        return _attr_value(element, selectors.description_attr)

    content = inner_html(element) or element.get_text()
    return wrap_cdata(content) if content.strip() else ""


def _fallback_fields(
    container: Tag,
    selectors: SelectorMap,
    title: str,
    link: str,
    description: str,
) -> tuple[str, str, str]:
    """
    选择器未命中时的回退.

    - 标题：第一个 ``<a>`` 的文本，其次为容器文本的前 50 个字符
    - 链接：未配置链接选择器时取第一个 ``<a>`` 的 href
    - 描述：使用标题
    """
    anchor = container.find("a")
    if not title:
        title = anchor.get_text().strip() if anchor is not None else ""
        title = title or container.get_text().strip()[:TITLE_FALLBACK_LENGTH]
    if not link and not selectors.link and anchor is not None:
        link = _attr_value(anchor, "href")
    if not description:
        description = title
    return title, link, description


def _extract_container(
    container: Tag,
    config: HtmlSourceConfig,
    base_url: str,
    now: datetime,
) -> FeedItem | None:
    selectors = config.selectors
    title = _select_text(container, selectors.title, selectors.title_attr)
    link = _select_text(container, selectors.link, selectors.link_attr, "href")
    description = _select_description(container, selectors)
    if config.fallback_fields:
        title, link, description = _fallback_fields(container, selectors, title, link, description)

    date_text = _select_text(container, selectors.pub_date, selectors.pub_date_attr)
    image_url = _select_text(container, selectors.image, selectors.image_attr, "src")

    return build_item(
        title=title,
        link=link,
        description=description,
        author=_select_text(container, selectors.author, selectors.author_attr),
        pub_date=normalize_pub_date(date_text, now=now),
        enclosure=image_enclosure(image_url, base_url),
        base_url=config.link_base_url or base_url,
        source_url=config.url,
    )


def extract_html(
    document: str,
    config: HtmlSourceConfig,
    base_url: str,
    key: str | None = None,
) -> Extraction:
    """
    按 CSS 选择器从网页中抽取条目.

    遍历到 ``max_items`` 个容器即停止，不再解析后续容器。
    """
    selectors = config.selectors
    if not selectors.container:
        msg = "配置缺少容器选择器 (container)"
        raise ExtractionError(msg)
    if not selectors.title and not selectors.link and not config.fallback_fields:
        msg = "配置至少需要标题 (title) 或链接 (link) 选择器"
        raise ExtractionError(msg)

    soup = BeautifulSoup(document, "lxml")
    containers = soup.select(selectors.container)
    logger.info(f"选择器 {selectors.container} 匹配到 {len(containers)} 个容器")

    now = datetime.now(UTC)
    items: list[FeedItem] = []
    for index, container in enumerate(containers):
        if index >= config.max_items:
            break
        item = _extract_container(container, config, base_url, now)
        if item is not None:
            items.append(item)

    info = config.channel_info
    page_title = soup.title.get_text().strip() if soup.title else ""
    channel = Channel(
        title=(info and info.title) or config.channel_title or page_title or key or "自定义 RSS",
        link=config.url,
        description=(info and info.description) or config.channel_desc or "使用 WorkerRSS 生成",
        image=info.image if info else None,
    )
    return Extraction(items=items, channel=channel)
