"""标准 RSS / Atom 解析."""

import logging
from datetime import UTC, datetime

from bs4 import BeautifulSoup, Tag

from workerrss.extraction.common import Extraction, ExtractionError, build_item
from workerrss.extraction.dates import normalize_pub_date
from workerrss.extraction.normalizer import child_tags, qualified_name
from workerrss.models.item import Channel, Enclosure, FeedItem
from workerrss.models.source import FeedSourceConfig
from workerrss.utils.html_parser import strip_cdata_wrapper, unescape_html

logger = logging.getLogger(__name__)


def _child(parent: Tag | None, *names: str) -> Tag | None:
    """按顺序查找第一个存在的直接子元素."""
    if parent is None:
        return None
    children = child_tags(parent)
    for name in names:
        for child in children:
            if qualified_name(child) == name:
                return child
    return None


def _child_text(parent: Tag | None, *names: str) -> str:
    for name in names:
        child = _child(parent, name)
        if child is not None:
            text = child.get_text().strip()
            if text:
                return text
    return ""


def _description(parent: Tag, *names: str) -> str:
    """取内容元素的内部 HTML，去掉 CDATA 标记并还原多重转义."""
    for name in names:
        node = _child(parent, name)
        if node is None:
            continue
        html = strip_cdata_wrapper(node.decode_contents())
        if html.strip():
            return unescape_html(html)
    return ""


def _atom_links(entry: Tag) -> list[Tag]:
    return [child for child in child_tags(entry) if qualified_name(child) == "link"]


def _atom_link(entry: Tag) -> str:
    links = _atom_links(entry)
    for link in links:
        if link.get("rel") == "alternate" and link.get("href"):
            return link["href"]
    for link in links:
        if link.get("href") and link.get("rel") in (None, "alternate"):
            return link["href"]
    return links[0].get("href", "") if links else ""


def _atom_enclosure(entry: Tag) -> Enclosure | None:
    for link in _atom_links(entry):
        if link.get("rel") == "enclosure" and link.get("href"):
            return Enclosure(
                url=link["href"],
                type=link.get("type") or "application/octet-stream",
                length=link.get("length") or "0",
            )
    return None


def _rss_enclosure(item: Tag) -> Enclosure | None:
    node = _child(item, "enclosure")
    if node is None or not node.get("url"):
        return None
    return Enclosure(
        url=node["url"],
        type=node.get("type") or "application/octet-stream",
        length=node.get("length") or "0",
    )


def _parse_atom(
    soup: BeautifulSoup, config: FeedSourceConfig, base_url: str, now: datetime
) -> tuple[list[FeedItem], str, str]:
    feed = soup.find("feed")
    items: list[FeedItem] = []
    for index, entry in enumerate(soup.find_all("entry")):
        if index >= config.max_items:
            break
        item = build_item(
            title=_child_text(entry, "title"),
            link=_atom_link(entry),
            description=_description(entry, "content", "summary"),
            author=_child_text(_child(entry, "author"), "name") or None,
            pub_date=normalize_pub_date(_child_text(entry, "published", "updated"), now=now),
            guid=_child_text(entry, "id"),
            enclosure=_atom_enclosure(entry),
            base_url=base_url,
            source_url=config.url,
        )
        if item is not None:
            items.append(item)

    return items, _child_text(feed, "title"), _child_text(feed, "subtitle")


def _parse_rss(
    soup: BeautifulSoup, config: FeedSourceConfig, base_url: str, now: datetime
) -> tuple[list[FeedItem], str, str]:
    channel = soup.find("channel")
    items: list[FeedItem] = []
    for index, entry in enumerate(soup.find_all("item")):
        if index >= config.max_items:
            break
        item = build_item(
            title=_child_text(entry, "title"),
            link=_child_text(entry, "link"),
            description=_description(entry, "content:encoded", "description"),
            author=_child_text(entry, "author", "dc:creator") or None,
            pub_date=normalize_pub_date(_child_text(entry, "pubDate", "dc:date"), now=now),
            guid=_child_text(entry, "guid"),
            enclosure=_rss_enclosure(entry),
            base_url=base_url,
            source_url=config.url,
        )
        if item is not None:
            items.append(item)

    return items, _child_text(channel, "title"), _child_text(channel, "description")


def parse_feed(
    document: str,
    config: FeedSourceConfig,
    base_url: str,
    key: str | None = None,
) -> Extraction:
    """
    解析标准 RSS 2.0 / RSS 1.0 / Atom 文档.

    存在 ``<feed>`` 时按 Atom 处理，存在 ``<rss>`` 或 ``<channel>`` 时按 RSS 处理。
    """
    soup = BeautifulSoup(document, "xml")
    now = datetime.now(UTC)

    if soup.find("feed") is not None:
        logger.info("检测到 Atom 格式")
        items, feed_title, feed_desc = _parse_atom(soup, config, base_url, now)
    elif soup.find("rss") is not None or soup.find("channel") is not None:
        logger.info("检测到 RSS 格式")
        items, feed_title, feed_desc = _parse_rss(soup, config, base_url, now)
    else:
        msg = "文档不是有效的 RSS 或 Atom 订阅源"
        raise ExtractionError(msg)

    channel = Channel(
        title=config.channel_title or feed_title or key or "RSS Feed",
        link=config.url,
        description=config.channel_desc or feed_desc or key or config.url,
    )
    return Extraction(items=items, channel=channel)
