"""测试订阅源构建与文件夹聚合."""

import json

import pytest

from tests.conftest import SAMPLE_HTML, SAMPLE_RSS, FakeFetcher
from workerrss.config import Settings
from workerrss.core.builder import FeedBuilder
from workerrss.core.folder import FolderAggregator
from workerrss.models.request import ExtractionRequest


def html_request(url: str = "https://ex.com", **kwargs) -> ExtractionRequest:
    return ExtractionRequest.model_validate(
        {
            "key": kwargs.pop("key", None),
            "source": {
                "kind": "html",
                "url": url,
                "selectors": {"container": ".post", "title": ".title", "link": "a"},
                **kwargs,
            },
        }
    )


def feed_request(url: str, key: str | None = None, fmt: str = "rss") -> ExtractionRequest:
    return ExtractionRequest.model_validate(
        {"key": key, "format": fmt, "source": {"kind": "feed", "url": url}}
    )


class TestFeedBuilder:
    """测试 FeedBuilder."""

    @pytest.mark.asyncio
    async def test_build_html_feed(self, fake_fetcher: FakeFetcher, settings: Settings) -> None:
        """抓取网页并输出 RSS."""
        builder = FeedBuilder(fake_fetcher, settings=settings)
        result = await builder.build(html_request())

        assert result.is_error is False
        assert result.message is None
        assert [item.link for item in result.items] == ["https://ex.com/p1", "https://ex.com/p2"]
        assert "<rss" in result.data
        assert result.effective_source_url == "https://ex.com"
        assert result.logs

    @pytest.mark.asyncio
    async def test_effective_url_is_link_base(self, settings: Settings) -> None:
        """相对链接按重定向后的地址解析."""
        fetcher = FakeFetcher(
            pages={"https://old.ex.com": SAMPLE_HTML},
            redirects={"https://old.ex.com": "https://mirror.ex.com/blog/"},
        )
        result = await FeedBuilder(fetcher, settings=settings).build(
            html_request("https://old.ex.com")
        )
        assert result.items[0].link == "https://mirror.ex.com/p1"
        assert result.effective_source_url == "https://mirror.ex.com/blog/"

    @pytest.mark.asyncio
    async def test_fetch_error_becomes_error_feed(self, settings: Settings) -> None:
        """抓取异常转换为单条目错误订阅源."""
        fetcher = FakeFetcher(errors={"https://bad.ex.com": Exception("HTTP 500")})
        result = await FeedBuilder(fetcher, settings=settings).build(
            html_request("https://bad.ex.com")
        )

        assert result.is_error is True
        assert result.message == "HTTP 500"
        assert len(result.items) == 1
        assert "500" in result.items[0].description
        assert "500" in result.data
        assert result.channel.title == "Error"

    @pytest.mark.asyncio
    async def test_config_error_becomes_error_feed(
        self, fake_fetcher: FakeFetcher, settings: Settings
    ) -> None:
        """配置错误同样转换为错误订阅源."""
        request = ExtractionRequest.model_validate(
            {"source": {"kind": "html", "url": "https://ex.com", "selectors": {"title": ".title"}}}
        )
        result = await FeedBuilder(fake_fetcher, settings=settings).build(request)
        assert result.is_error is True
        assert "container" in result.message

    @pytest.mark.asyncio
    async def test_json_format(self, fake_fetcher: FakeFetcher, settings: Settings) -> None:
        """按请求格式序列化."""
        result = await FeedBuilder(fake_fetcher, settings=settings).build(
            feed_request("https://news.example.com/feed", fmt="json")
        )
        feed = json.loads(result.data)
        assert feed["title"] == "Upstream RSS"
        assert [entry["title"] for entry in feed["items"]] == ["First story", "Second story"]


class TestFolderAggregator:
    """测试文件夹聚合."""

    @pytest.mark.asyncio
    async def test_merge_sort_and_prefix(self, settings: Settings) -> None:
        """合并多个来源，按时间倒序，标题加来源前缀，失败来源为空."""
        fetcher = FakeFetcher(
            pages={
                "https://a.ex.com/feed": SAMPLE_RSS,
                "https://b.ex.com/feed": SAMPLE_RSS.replace("2024", "2025"),
            },
            errors={"https://c.ex.com/feed": Exception("HTTP 500")},
        )
        aggregator = FolderAggregator(FeedBuilder(fetcher, settings=settings))
        items, channel = await aggregator.aggregate(
            "news",
            [
                feed_request("https://a.ex.com/feed", key="A"),
                feed_request("https://b.ex.com/feed", key="B"),
                feed_request("https://c.ex.com/feed", key="C"),
            ],
        )

        assert channel.title == "Folder: news"
        assert len(items) == 4
        assert [item.title for item in items] == [
            "[B] First story",
            "[B] Second story",
            "[A] First story",
            "[A] Second story",
        ]
        assert items[0].source_title == "B"
        assert sorted(fetcher.calls) == [
            "https://a.ex.com/feed",
            "https://b.ex.com/feed",
            "https://c.ex.com/feed",
        ]

    @pytest.mark.asyncio
    async def test_max_items(self, settings: Settings) -> None:
        """聚合结果不超过上限."""
        fetcher = FakeFetcher(pages={"https://a.ex.com/feed": SAMPLE_RSS})
        aggregator = FolderAggregator(FeedBuilder(fetcher, settings=settings), max_items=1)
        items, _ = await aggregator.aggregate("one", [feed_request("https://a.ex.com/feed")])
        assert len(items) == 1
        assert items[0].title == "[Upstream RSS] First story"
