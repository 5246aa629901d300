"""订阅源生成 API."""

from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from workerrss.config import Settings, get_settings
from workerrss.core.builder import FeedBuilder
from workerrss.core.folder import FolderAggregator
from workerrss.fetcher.client import DocumentFetcher, HttpxFetcher
from workerrss.models.request import ExtractionRequest, FeedFormat, FolderRequest
from workerrss.pipeline.translator import Translator
from workerrss.serializers import serialize

router = APIRouter(prefix="/api/feeds", tags=["feeds"])

CONTENT_TYPES: dict[str, str] = {
    "rss": "application/rss+xml; charset=utf-8",
    "atom": "application/atom+xml; charset=utf-8",
    "json": "application/json; charset=utf-8",
}

PREVIEW_ITEMS = 5


async def get_fetcher(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[DocumentFetcher]:
    """每个请求一个抓取客户端，结束时关闭."""
    fetcher = HttpxFetcher(settings)
    try:
        yield fetcher
    finally:
        await fetcher.close()


def get_translator() -> Translator | None:
    """翻译服务由部署方注入，默认不翻译."""
    return None


def get_builder(
    fetcher: DocumentFetcher = Depends(get_fetcher),
    translator: Translator | None = Depends(get_translator),
    settings: Settings = Depends(get_settings),
) -> FeedBuilder:
    return FeedBuilder(fetcher, translator=translator, settings=settings)


def _feed_response(data: str, format: FeedFormat, is_error: bool, settings: Settings) -> Response:
    max_age = settings.cache_error_seconds if is_error else settings.cache_success_seconds
    return Response(
        content=data,
        media_type=CONTENT_TYPES.get(format, CONTENT_TYPES["rss"]),
        headers={"Cache-Control": f"public, max-age={max_age}"},
    )


@router.post("/render")
async def render_feed(
    request: ExtractionRequest,
    builder: FeedBuilder = Depends(get_builder),
    settings: Settings = Depends(get_settings),
) -> Response:
    """按配置生成订阅源."""
    result = await builder.build(request)
    return _feed_response(result.data, request.format, result.is_error, settings)


@router.post("/preview")
async def preview_feed(
    request: ExtractionRequest,
    builder: FeedBuilder = Depends(get_builder),
) -> dict:
    """预览抽取结果，返回前几个条目和运行日志."""
    result = await builder.build(request)
    return {
        "success": not result.is_error,
        "total": len(result.items),
        "items": [item.model_dump(by_alias=True) for item in result.items[:PREVIEW_ITEMS]],
        "channel": result.channel.model_dump(by_alias=True),
        "message": result.message,
        "logs": result.logs,
        "effectiveSourceUrl": result.effective_source_url,
    }


@router.post("/folder")
async def render_folder(
    request: FolderRequest,
    builder: FeedBuilder = Depends(get_builder),
    settings: Settings = Depends(get_settings),
) -> Response:
    """合并多个来源为一个订阅源."""
    aggregator = FolderAggregator(builder, max_items=settings.folder_max_items)
    items, channel = await aggregator.aggregate(request.name, request.sources, link=request.link)
    data = serialize(items, channel, request.format)
    return _feed_response(data, request.format, False, settings)
