"""翻译阶段调用约定."""

import asyncio
import logging
from abc import ABC, abstractmethod

from workerrss.models.item import FeedItem
from workerrss.models.pipeline import TranslationConfig, TranslationSettings

logger = logging.getLogger(__name__)

DESCRIPTION_SEPARATOR = "<br/><hr/><br/>"


class Translator(ABC):
    """
    翻译服务抽象基类.

    具体服务只需实现 ``translate_text``；``translate_item`` 负责按
    scope / format 把译文合并回条目。
    """

    @abstractmethod
    async def translate_text(
        self,
        text: str,
        config: TranslationConfig,
        settings: TranslationSettings | None,
    ) -> str:
        """翻译一段文本，返回空串表示没有译文."""
        ...

    async def translate_item(
        self,
        item: FeedItem,
        config: TranslationConfig,
        settings: TranslationSettings | None,
    ) -> FeedItem:
        """翻译单个条目，返回新条目."""
        title, description = item.title, item.description
        if not title and not description:
            return item

        updates: dict[str, object] = {}
        if title and config.scope in ("both", "title"):
            translated = await self.translate_text(title, config, settings)
            if translated:
                if config.format == "append":
                    updates["title"] = f"{title} ({translated})"
                elif config.format == "prepend":
                    updates["title"] = f"{translated} ({title})"
                else:
                    updates["title"] = translated

        if description and config.scope in ("both", "desc"):
            translated = await self.translate_text(description, config, settings)
            if translated:
                if config.format == "append":
                    updates["description"] = f"{description}{DESCRIPTION_SEPARATOR}{translated}"
                elif config.format == "prepend":
                    updates["description"] = f"{translated}{DESCRIPTION_SEPARATOR}{description}"
                else:
                    updates["description"] = translated

        updates["is_translated"] = True
        return item.model_copy(update=updates)


async def _translate_one(
    translator: Translator,
    item: FeedItem,
    config: TranslationConfig,
    settings: TranslationSettings | None,
) -> FeedItem:
    try:
        return await translator.translate_item(item, config, settings)
    except Exception as e:
        logger.error(f"翻译失败: {item.title[:20]}... {e}")
        return item


async def translate_items(
    items: list[FeedItem],
    translator: Translator,
    config: TranslationConfig,
    settings: TranslationSettings | None = None,
    concurrency: int = 3,
) -> list[FeedItem]:
    """
    分批并发翻译，保持原有顺序.

    每批最多 ``concurrency`` 个并发调用，单个条目失败时原样保留。
    """
    if not items or not config.enabled:
        return items

    chunk_size = max(concurrency, 1)
    logger.info(f"开始翻译 {len(items)} 个条目 -> {config.target_lang}")

    results: list[FeedItem] = []
    for start in range(0, len(items), chunk_size):
        chunk = items[start : start + chunk_size]
        translated = await asyncio.gather(
            *(_translate_one(translator, item, config, settings) for item in chunk)
        )
        results.extend(translated)
    return results
