"""抽取请求与结果模型."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from workerrss.models.item import Channel, FeedItem
from workerrss.models.pipeline import PipelineOptions, TranslationSettings
from workerrss.models.source import ExtractionConfig

FeedFormat = Literal["rss", "atom", "json"]


class ExtractionRequest(BaseModel):
    """一次抽取请求，由调用方一次性组装，核心只读."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    key: str | None = None  # 路由名，作为频道标题的回退值
    source: ExtractionConfig
    pipeline: PipelineOptions = Field(default_factory=PipelineOptions)
    format: FeedFormat = "rss"
    translation_settings: TranslationSettings | None = None


class ExtractionResult(BaseModel):
    """抽取结果，交给 HTTP 层."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    data: str
    items: list[FeedItem] = Field(default_factory=list)
    channel: Channel = Field(default_factory=Channel)
    is_error: bool = False
    message: str | None = None
    logs: list[str] = Field(default_factory=list)
    effective_source_url: str | None = None  # 仅供参考，不回写配置


class FolderRequest(BaseModel):
    """文件夹聚合请求."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str
    sources: list[ExtractionRequest] = Field(default_factory=list)
    format: FeedFormat = "rss"
    link: str = ""  # 聚合频道的链接
