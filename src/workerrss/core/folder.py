"""文件夹聚合：多个订阅源合并为一个."""

import asyncio
import logging
from datetime import datetime

from workerrss.core.builder import FeedBuilder
from workerrss.extraction.dates import EPOCH, parse_date
from workerrss.models.item import Channel, FeedItem
from workerrss.models.request import ExtractionRequest

logger = logging.getLogger(__name__)


def source_title(request: ExtractionRequest, channel: Channel | None = None) -> str:
    """来源标题：配置的频道标题 > 路由名 > 抽取出的频道标题 > 地址."""
    return (
        request.source.channel_title
        or request.key
        or (channel.title if channel else "")
        or request.source.url
    )


def _sort_key(item: FeedItem) -> datetime:
    return parse_date(item.pub_date) or EPOCH


class FolderAggregator:
    """并发抓取文件夹内所有来源，按时间倒序合并."""

    def __init__(self, builder: FeedBuilder, max_items: int | None = None) -> None:
        self.builder = builder
        self.max_items = max_items or builder.settings.folder_max_items

    async def _collect(self, request: ExtractionRequest) -> list[FeedItem]:
        try:
            outcome = await self.builder.run(request)
        except Exception as e:
            logger.error(f"文件夹来源抓取失败 {request.source.url}: {e}")
            return []

        if outcome.is_error:
            logger.warning(f"文件夹来源出错，已跳过 {request.source.url}: {outcome.error}")
            return []

        title = source_title(request, outcome.channel)
        return [
            item.model_copy(update={"title": f"[{title}] {item.title}", "source_title": title})
            for item in outcome.items
        ]

    async def aggregate(
        self,
        name: str,
        requests: list[ExtractionRequest],
        link: str = "",
    ) -> tuple[list[FeedItem], Channel]:
        """
        聚合多个来源.

        Returns:
            (条目列表, 频道信息)，条目按发布时间倒序，最多 ``max_items`` 个
        """
        results = await asyncio.gather(*(self._collect(request) for request in requests))
        items = [item for source_items in results for item in source_items]
        items.sort(key=_sort_key, reverse=True)
        items = items[: self.max_items]

        logger.info(f"文件夹 {name}: {len(requests)} 个来源，合并 {len(items)} 个条目")
        channel = Channel(
            title=f"Folder: {name}",
            link=link,
            description=f"Combined feed for folder {name}",
        )
        return items, channel


__all__ = ["FolderAggregator", "source_title"]
