"""订阅源构建：抓取 -> 抽取 -> 后处理 -> 序列化."""

import logging
from dataclasses import dataclass, field

from workerrss.config import Settings, get_settings
from workerrss.extraction.engine import extract_with_channel
from workerrss.fetcher.client import DocumentFetcher
from workerrss.fetcher.extractor import FullTextExtractor
from workerrss.models.item import Channel, FeedItem
from workerrss.models.request import ExtractionRequest, ExtractionResult
from workerrss.pipeline.runner import run_pipeline
from workerrss.pipeline.translator import Translator
from workerrss.serializers import serialize

logger = logging.getLogger(__name__)


class RunLog:
    """收集一次构建的运行日志，同时写入 logging."""

    def __init__(self, name: str = "") -> None:
        self.prefix = f"[{name}] " if name else ""
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)
        logger.info(f"{self.prefix}{message}")


@dataclass
class BuildOutcome:
    """未序列化的构建结果."""

    items: list[FeedItem] = field(default_factory=list)
    channel: Channel = field(default_factory=Channel)
    logs: list[str] = field(default_factory=list)
    effective_source_url: str | None = None
    error: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


def error_feed(source_url: str, message: str) -> tuple[list[FeedItem], Channel]:
    """把错误转为只含一个条目的订阅源."""
    item = FeedItem(
        title=f"抓取失败: {message}"[:120],
        link=source_url,
        description=message,
        guid=f"{source_url}#error",
    )
    channel = Channel(title="Error", link=source_url, description=message)
    return [item], channel


class FeedBuilder:
    """订阅源构建入口，任何异常都转换为错误订阅源，不向外抛出."""

    def __init__(
        self,
        fetcher: DocumentFetcher,
        translator: Translator | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.translator = translator
        self.settings = settings or get_settings()
        self.extractor = FullTextExtractor(fetcher)

    async def run(self, request: ExtractionRequest) -> BuildOutcome:
        """执行抓取、抽取与后处理，返回条目与频道."""
        source = request.source
        log = RunLog(request.key or "")
        outcome = BuildOutcome(logs=log.messages)

        try:
            log(f"抓取 {source.url}")
            document = await self.fetcher.fetch(source.url, encoding=source.encoding)
            outcome.effective_source_url = document.url
            if document.url != source.url:
                log(f"实际地址: {document.url}")

            extraction = extract_with_channel(document.text, source, document.url, request.key)
            log(f"抽取到 {len(extraction.items)} 个条目")

            items = await run_pipeline(
                extraction.items,
                request.pipeline,
                extractor=self.extractor,
                translator=self.translator,
                translation_settings=request.translation_settings,
                encoding=source.encoding,
                settings=self.settings,
                log=log,
            )
            outcome.items = items
            outcome.channel = extraction.channel

        except Exception as e:
            message = str(e) or type(e).__name__
            logger.exception(f"构建订阅源失败 {source.url}: {message}")
            log(f"错误: {message}")
            outcome.error = message
            outcome.items, outcome.channel = error_feed(source.url, message)

        return outcome

    async def build(self, request: ExtractionRequest) -> ExtractionResult:
        """构建并序列化订阅源."""
        outcome = await self.run(request)
        try:
            data = serialize(outcome.items, outcome.channel, request.format)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.exception(f"序列化失败: {message}")
            outcome.error = message
            outcome.items, outcome.channel = error_feed(request.source.url, message)
            data = serialize(outcome.items, outcome.channel, request.format)

        return ExtractionResult(
            data=data,
            items=outcome.items,
            channel=outcome.channel,
            is_error=outcome.is_error,
            message=outcome.error,
            logs=outcome.logs,
            effective_source_url=outcome.effective_source_url,
        )
