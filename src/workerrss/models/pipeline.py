"""后处理流水线配置模型."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _PipelineModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class FilterRule(_PipelineModel):
    """过滤规则."""

    field: str = "title"
    type: str = "substring"  # substring | regex
    value: str = ""
    mode: str = "exclude"  # include | exclude
    active: bool = True


class TranslationConfig(_PipelineModel):
    """单个订阅源的翻译选项."""

    enabled: bool = False
    target_lang: str = "zh"
    source_lang: str = "auto"
    scope: Literal["both", "title", "desc"] = "both"
    format: Literal["replace", "append", "prepend"] = "replace"


class TranslationSettings(_PipelineModel):
    """全局翻译服务配置."""

    provider: str | None = None
    api_url: str | None = None
    api_key: str | None = None
    model: str = "gpt-3.5-turbo"


class PipelineOptions(_PipelineModel):
    """后处理阶段开关."""

    full_text: bool = False
    full_text_selector: str = ""
    full_text_delay_ms: int | None = Field(default=None, ge=0)  # 为空时使用全局配置
    filters: list[FilterRule] = Field(default_factory=list)
    translation: TranslationConfig | None = None
