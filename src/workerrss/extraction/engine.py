"""抽取引擎入口：按来源类型分派."""

from workerrss.extraction.common import Extraction, ExtractionError
from workerrss.extraction.feed import parse_feed
from workerrss.extraction.html import extract_html
from workerrss.extraction.structured import extract_json, extract_xml
from workerrss.extraction.xpath import extract_xpath
from workerrss.models.item import FeedItem
from workerrss.models.source import (
    FeedSourceConfig,
    HtmlSourceConfig,
    JsonSourceConfig,
    SourceConfig,
    XpathSourceConfig,
)


def extract_with_channel(
    document: str,
    config: SourceConfig,
    base_url: str,
    key: str | None = None,
) -> Extraction:
    """
    抽取条目及频道信息.

    Args:
        document: 抓取到的文档文本
        config: 来源配置
        base_url: 实际抓取的地址，用于解析相对链接
        key: 路由名，作为频道标题的回退值

    Raises:
        ExtractionError: 配置缺失或文档无法解析
    """
    if isinstance(config, HtmlSourceConfig):
        extraction = extract_html(document, config, base_url, key)
    elif isinstance(config, JsonSourceConfig):
        extraction = extract_json(document, config, base_url, key)
    elif isinstance(config, XpathSourceConfig):
        extraction = extract_xpath(document, config, base_url, key)
    elif isinstance(config, FeedSourceConfig):
        if config.item_selector:
            extraction = extract_xml(document, config, base_url, key)
        else:
            extraction = parse_feed(document, config, base_url, key)
    else:
        msg = f"不支持的来源配置类型: {type(config).__name__}"
        raise ExtractionError(msg)

    # 各模式的截断点不同，这里统一保证上限
    extraction.items = extraction.items[: config.max_items]
    return extraction


def extract(document: str, config: SourceConfig, base_url: str) -> list[FeedItem]:
    """抽取条目列表."""
    return extract_with_channel(document, config, base_url).items


__all__ = ["Extraction", "ExtractionError", "extract", "extract_with_channel"]
