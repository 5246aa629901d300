"""FeedItem 条目与 Channel 频道模型."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel, to_snake


class Enclosure(BaseModel):
    """条目附件（图片/视频）."""

    url: str
    type: str = "image/jpeg"
    length: str = "0"  # 真实大小需要额外请求，未知时为 "0"


class FeedItem(BaseModel):
    """规范化后的 Feed 条目."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    link: str = ""
    description: str = ""  # HTML 片段，可能包裹在 CDATA 中
    author: str | None = None
    pub_date: str = ""  # RFC 2822
    guid: str = ""
    enclosure: Enclosure | None = None
    is_translated: bool = False
    source_title: str | None = None  # 文件夹聚合时的来源标题

    def field_text(self, name: str) -> str:
        """按字段名（驼峰或下划线）取字符串值，缺失时为空串."""
        attr = name if name in type(self).model_fields else to_snake(name)
        if attr not in type(self).model_fields:
            return ""

        value = getattr(self, attr)
        if value is None:
            return ""
        if isinstance(value, Enclosure):
            return value.url
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)


class Channel(BaseModel):
    """频道元数据."""

    title: str = ""
    link: str = ""
    description: str = ""
    image: str | None = None
