"""RSS 2.0 输出."""

from datetime import UTC, datetime

from workerrss.extraction.dates import format_rfc2822, parse_date
from workerrss.models.item import Channel, FeedItem
from workerrss.serializers.common import (
    DEFAULT_CHANNEL_TITLE,
    PLACEHOLDER,
    as_cdata,
    escape_xml,
    or_placeholder,
)


def _item_xml(item: FeedItem, now: datetime) -> str:
    description = as_cdata(item.description) if item.description else PLACEHOLDER
    pub_date = format_rfc2822(parse_date(item.pub_date) or now)

    lines = [
        "    <item>",
        f"      <title>{escape_xml(or_placeholder(item.title))}</title>",
        f"      <link>{escape_xml(or_placeholder(item.link))}</link>",
        f"      <description>{description}</description>",
    ]
    if item.author:
        lines.append(f"      <author>{escape_xml(item.author)}</author>")
    if item.enclosure and item.enclosure.url:
        enclosure = item.enclosure
        lines.append(
            f'      <enclosure url="{escape_xml(enclosure.url)}" '
            f'length="{escape_xml(enclosure.length or "0")}" '
            f'type="{escape_xml(enclosure.type or "application/octet-stream")}" />'
        )
    lines.extend(
        [
            f'      <guid isPermaLink="false">{escape_xml(or_placeholder(item.guid))}</guid>',
            f"      <pubDate>{pub_date}</pubDate>",
            "    </item>",
        ]
    )
    return "\n".join(lines)


def to_rss(items: list[FeedItem], channel: Channel, now: datetime | None = None) -> str:
    """生成 RSS 2.0 文档."""
    now = now or datetime.now(UTC)
    title = escape_xml(channel.title or DEFAULT_CHANNEL_TITLE)
    link = escape_xml(or_placeholder(channel.link))

    head = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">',
        "  <channel>",
        f"    <title>{title}</title>",
        f"    <link>{link}</link>",
        f"    <description>{escape_xml(or_placeholder(channel.description))}</description>",
        f'    <atom:link href="{link}" rel="self" type="application/rss+xml" />',
        "    <language>zh-CN</language>",
        f"    <lastBuildDate>{format_rfc2822(now)}</lastBuildDate>",
    ]
    if channel.image:
        head.extend(
            [
                "    <image>",
                f"      <url>{escape_xml(channel.image)}</url>",
                f"      <title>{title}</title>",
                f"      <link>{link}</link>",
                "    </image>",
            ]
        )

    body = [_item_xml(item, now) for item in items]
    tail = ["  </channel>", "</rss>"]
    return "\n".join([*head, *body, *tail])
