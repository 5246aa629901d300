"""订阅源输出格式."""

from workerrss.models.item import Channel, FeedItem
from workerrss.models.request import FeedFormat
from workerrss.serializers.atom import to_atom
from workerrss.serializers.json_feed import to_json_feed
from workerrss.serializers.rss import to_rss


def serialize(items: list[FeedItem], channel: Channel, format: FeedFormat = "rss") -> str:
    """按格式输出订阅源文本."""
    if format == "atom":
        return to_atom(items, channel)
    if format == "json":
        return to_json_feed(items, channel)
    return to_rss(items, channel)


__all__ = ["serialize", "to_atom", "to_json_feed", "to_rss"]
