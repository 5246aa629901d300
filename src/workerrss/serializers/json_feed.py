"""JSON Feed 1.1 输出."""

import json
from typing import Any

from workerrss.extraction.dates import EPOCH, format_iso, parse_date
from workerrss.models.item import Channel, FeedItem
from workerrss.serializers.common import DEFAULT_CHANNEL_TITLE, content_html, summarize

JSON_FEED_VERSION = "https://jsonfeed.org/version/1.1"


def _size_in_bytes(length: str) -> int:
    try:
        return int(length)
    except (TypeError, ValueError):
        return 0


def _item_dict(item: FeedItem) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "id": item.guid or item.link,
        "url": item.link,
        "title": item.title,
        "content_html": content_html(item.description),
        "summary": summarize(item.description),
        "date_published": format_iso(parse_date(item.pub_date) or EPOCH),
    }
    if item.author:
        entry["author"] = {"name": item.author}
    if item.enclosure and item.enclosure.url:
        entry["attachments"] = [
            {
                "url": item.enclosure.url,
                "mime_type": item.enclosure.type,
                "size_in_bytes": _size_in_bytes(item.enclosure.length),
            }
        ]
    return entry


def to_json_feed(items: list[FeedItem], channel: Channel) -> str:
    """生成 JSON Feed 文档."""
    feed: dict[str, Any] = {
        "version": JSON_FEED_VERSION,
        "title": channel.title or DEFAULT_CHANNEL_TITLE,
        "home_page_url": channel.link,
        "feed_url": channel.link,
        "description": channel.description,
    }
    if channel.image:
        feed["icon"] = channel.image
        feed["favicon"] = channel.image
    feed["items"] = [_item_dict(item) for item in items]

    return json.dumps(feed, ensure_ascii=False, indent=2)
