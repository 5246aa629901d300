"""各抽取模式共享的类型与工具."""

import hashlib
import mimetypes
from dataclasses import dataclass, field

from workerrss.models.item import Channel, Enclosure, FeedItem
from workerrss.utils.html_parser import absolutize_url


class ExtractionError(Exception):
    """抽取失败（配置缺失或文档无法解析）."""


@dataclass
class Extraction:
    """一次抽取的产出."""

    items: list[FeedItem] = field(default_factory=list)
    channel: Channel = field(default_factory=Channel)


def fallback_guid(source_url: str, title: str) -> str:
    """没有链接时由来源地址和标题生成稳定的 guid."""
    digest = hashlib.sha1(title.encode("utf-8")).hexdigest()[:12]
    return f"{source_url}#{digest}"


def image_enclosure(url: str, base_url: str) -> Enclosure | None:
    """图片地址转为附件，类型按扩展名推断."""
    if not url:
        return None
    absolute = absolutize_url(url, base_url)
    mime_type, _ = mimetypes.guess_type(absolute.split("?", 1)[0])
    if not mime_type or not mime_type.startswith("image/"):
        mime_type = "image/jpeg"
    return Enclosure(url=absolute, type=mime_type, length="0")


def build_item(
    *,
    title: str,
    link: str,
    description: str,
    pub_date: str,
    base_url: str,
    source_url: str,
    guid: str = "",
    author: str | None = None,
    enclosure: Enclosure | None = None,
) -> FeedItem | None:
    """组装条目；标题和链接都为空时丢弃（返回 None）."""
    title = title.strip()
    link = absolutize_url(link.strip(), base_url)
    if not title and not link:
        return None

    if enclosure is not None:
        enclosure = enclosure.model_copy(
            update={"url": absolutize_url(enclosure.url, base_url)}
        )

    return FeedItem(
        title=title,
        link=link,
        description=description,
        author=author or None,
        pub_date=pub_date,
        guid=guid.strip() or link or fallback_guid(source_url, title),
        enclosure=enclosure,
    )
