"""Atom 1.0 输出."""

from datetime import UTC, datetime

from workerrss.extraction.dates import format_iso, parse_date
from workerrss.models.item import Channel, FeedItem
from workerrss.serializers.common import (
    DEFAULT_CHANNEL_TITLE,
    content_html,
    escape_xml,
    or_placeholder,
    summarize,
)
from workerrss.utils.html_parser import wrap_cdata


def _entry_xml(item: FeedItem, now: datetime) -> str:
    published = format_iso(parse_date(item.pub_date) or now)
    entry_id = item.guid or item.link

    lines = [
        "  <entry>",
        f"    <title>{escape_xml(or_placeholder(item.title))}</title>",
        f'    <link href="{escape_xml(or_placeholder(item.link))}" />',
        f"    <id>{escape_xml(or_placeholder(entry_id))}</id>",
        f"    <published>{published}</published>",
        f"    <updated>{published}</updated>",
    ]
    if item.description:
        lines.append(f'    <summary type="text">{escape_xml(summarize(item.description))}</summary>')
        lines.append(f'    <content type="html">{wrap_cdata(content_html(item.description))}</content>')
    if item.author:
        lines.append(f"    <author><name>{escape_xml(item.author)}</name></author>")
    lines.append("  </entry>")
    return "\n".join(lines)


def to_atom(items: list[FeedItem], channel: Channel, now: datetime | None = None) -> str:
    """生成 Atom 文档，feed 的 updated 取第一个条目的时间."""
    now = now or datetime.now(UTC)
    link = escape_xml(or_placeholder(channel.link))
    first_date = parse_date(items[0].pub_date) if items else None

    head = [
        '<?xml version="1.0" encoding="utf-8"?>',
        '<feed xmlns="http://www.w3.org/2005/Atom">',
        f"  <title>{escape_xml(channel.title or DEFAULT_CHANNEL_TITLE)}</title>",
        f'  <link href="{link}" />',
        f'  <link href="{link}" rel="self" />',
        f"  <id>{link}</id>",
        f"  <updated>{format_iso(first_date or now)}</updated>",
        f"  <subtitle>{escape_xml(or_placeholder(channel.description))}</subtitle>",
    ]
    if channel.image:
        image = escape_xml(channel.image)
        head.append(f"  <logo>{image}</logo>")
        head.append(f"  <icon>{image}</icon>")

    body = [_entry_xml(item, now) for item in items]
    return "\n".join([*head, *body, "</feed>"])
