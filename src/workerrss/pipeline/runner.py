"""后处理流水线：全文 -> 过滤 -> 翻译."""

import asyncio
import logging
from collections.abc import Callable

from workerrss.config import Settings, get_settings
from workerrss.fetcher.extractor import FullTextExtractor
from workerrss.models.item import FeedItem
from workerrss.models.pipeline import PipelineOptions, TranslationSettings
from workerrss.pipeline.filters import apply_filters
from workerrss.pipeline.translator import Translator, translate_items

logger = logging.getLogger(__name__)


async def fetch_full_text(
    items: list[FeedItem],
    extractor: FullTextExtractor,
    selector: str = "",
    *,
    delay_seconds: float = 0.2,
    encoding: str = "auto",
    log: Callable[[str], None] | None = None,
) -> list[FeedItem]:
    """
    逐条抓取原文替换 description.

    顺序执行，两次请求之间固定等待 ``delay_seconds``；抓取失败的条目原样保留。
    """
    log = log or logger.info
    targets = [index for index, item in enumerate(items) if item.link]
    if not targets:
        return items

    log(f"开始抓取全文: {len(targets)} 个条目")
    results = list(items)
    replaced = 0
    for position, index in enumerate(targets):
        if position > 0 and delay_seconds > 0:
            await asyncio.sleep(delay_seconds)

        item = items[index]
        result = await extractor.fetch(item.link, selector, encoding)
        if result.success and result.content_html:
            results[index] = item.model_copy(update={"description": result.content_html})
            replaced += 1
        else:
            log(f"全文抓取失败，保留原内容: {item.link} ({result.error})")

    log(f"全文抓取完成: {replaced}/{len(targets)}")
    return results


async def run_pipeline(
    items: list[FeedItem],
    options: PipelineOptions,
    *,
    extractor: FullTextExtractor | None = None,
    translator: Translator | None = None,
    translation_settings: TranslationSettings | None = None,
    encoding: str = "auto",
    settings: Settings | None = None,
    log: Callable[[str], None] | None = None,
) -> list[FeedItem]:
    """
    按顺序执行后处理阶段.

    Args:
        items: 抽取出的条目
        options: 阶段开关
        extractor: 全文提取器，为空时跳过全文阶段
        translator: 翻译服务，为空时跳过翻译阶段
        translation_settings: 全局翻译配置
        encoding: 抓取原文时使用的编码
        settings: 应用配置
        log: 运行日志收集函数
    """
    settings = settings or get_settings()
    log = log or logger.info

    if options.full_text:
        if extractor is None:
            log("未配置全文提取器，跳过全文阶段")
        else:
            delay_ms = options.full_text_delay_ms
            if delay_ms is None:
                delay_ms = settings.full_text_delay_ms
            items = await fetch_full_text(
                items,
                extractor,
                options.full_text_selector,
                delay_seconds=delay_ms / 1000,
                encoding=encoding,
                log=log,
            )

    if options.filters:
        before = len(items)
        items = apply_filters(items, options.filters)
        log(f"过滤后剩余 {len(items)}/{before} 个条目")

    translation = options.translation
    if translation is not None and translation.enabled:
        if translator is None:
            log("未配置翻译服务，跳过翻译阶段")
        else:
            items = await translate_items(
                items,
                translator,
                translation,
                translation_settings,
                concurrency=settings.translation_concurrency,
            )

    return items
