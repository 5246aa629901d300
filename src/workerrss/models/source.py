"""抽取配置模型.

四种来源配置通过 ``kind`` 字段区分：

- ``html``: CSS 选择器抽取网页
- ``json``: 路径模板抽取 JSON 接口
- ``xpath``: XPath 表达式抽取网页
- ``feed``: 标准 RSS/Atom，或配合 ``itemSelector`` 做 XML 路径抽取
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ConfigModel(BaseModel):
    """配置模型基类：外部 JSON 使用驼峰键名."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class SourceConfig(_ConfigModel):
    """所有来源共享的字段."""

    url: str
    max_items: int = Field(default=20, ge=1)
    channel_title: str | None = None
    channel_desc: str | None = None
    encoding: str = "auto"  # auto 或编码名，如 gbk


class SelectorMap(_ConfigModel):
    """HTML 模式的字段选择器."""

    container: str | None = None
    title: str | None = None
    title_attr: str | None = None
    link: str | None = None
    link_attr: str | None = None
    description: str | None = None
    description_attr: str | None = None
    author: str | None = None
    author_attr: str | None = None
    pub_date: str | None = None
    pub_date_attr: str | None = None
    image: str | None = None
    image_attr: str | None = None


class ChannelInfo(_ConfigModel):
    """用户指定的频道信息."""

    title: str | None = None
    description: str | None = None
    image: str | None = None


class HtmlSourceConfig(SourceConfig):
    """网页 CSS 选择器抽取配置."""

    kind: Literal["html"] = "html"
    selectors: SelectorMap = Field(default_factory=SelectorMap)
    channel_info: ChannelInfo | None = None
    link_base_url: str = ""
    # 选择器未命中时回退到第一个链接或容器文本
    fallback_fields: bool = False


class JsonSourceConfig(SourceConfig):
    """JSON 接口路径抽取配置."""

    kind: Literal["json"] = "json"
    item_selector: str = ""
    title_selector: str = ""
    link_selector: str = ""
    link_need_join: bool = False
    link_base_url: str = ""
    desc_selector: str = ""
    date_selector: str = ""
    timestamp_mode: bool = False
    timestamp_unit: Literal["s", "ms"] = "ms"
    reverse_order: bool = False


class XpathSourceConfig(SourceConfig):
    """网页 XPath 抽取配置，字段表达式相对于条目节点求值."""

    kind: Literal["xpath"] = "xpath"
    item_selector: str = ""
    title_selector: str = ""
    link_selector: str = ""
    link_need_join: bool = False
    link_base_url: str = ""
    desc_selector: str = ""
    date_selector: str = ""
    timestamp_mode: bool = False
    timestamp_unit: Literal["s", "ms"] = "ms"


class FeedSourceConfig(SourceConfig):
    """RSS/Atom 订阅源配置，item_selector 为空时走标准解析."""

    kind: Literal["feed"] = "feed"
    item_selector: str = ""
    title_selector: str = ""
    link_selector: str = ""
    desc_selector: str = ""
    date_selector: str = ""


ExtractionConfig = Annotated[
    HtmlSourceConfig | JsonSourceConfig | XpathSourceConfig | FeedSourceConfig,
    Field(discriminator="kind"),
]
