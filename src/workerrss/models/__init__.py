"""数据模型."""

from workerrss.models.item import Channel, Enclosure, FeedItem
from workerrss.models.pipeline import (
    FilterRule,
    PipelineOptions,
    TranslationConfig,
    TranslationSettings,
)
from workerrss.models.request import (
    ExtractionRequest,
    ExtractionResult,
    FeedFormat,
    FolderRequest,
)
from workerrss.models.source import (
    ChannelInfo,
    ExtractionConfig,
    FeedSourceConfig,
    HtmlSourceConfig,
    JsonSourceConfig,
    SelectorMap,
    SourceConfig,
    XpathSourceConfig,
)

__all__ = [
    "Channel",
    "ChannelInfo",
    "Enclosure",
    "ExtractionConfig",
    "ExtractionRequest",
    "ExtractionResult",
    "FeedFormat",
    "FeedItem",
    "FeedSourceConfig",
    "FilterRule",
    "FolderRequest",
    "HtmlSourceConfig",
    "JsonSourceConfig",
    "PipelineOptions",
    "SelectorMap",
    "SourceConfig",
    "TranslationConfig",
    "TranslationSettings",
    "XpathSourceConfig",
]
