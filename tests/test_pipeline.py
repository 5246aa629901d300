"""测试后处理流水线：过滤、全文、翻译."""

from unittest.mock import AsyncMock, patch

import pytest

from tests.conftest import FakeFetcher
from workerrss.config import Settings
from workerrss.fetcher.client import FetchError
from workerrss.fetcher.extractor import FullTextExtractor
from workerrss.models.item import FeedItem
from workerrss.models.pipeline import (
    FilterRule,
    PipelineOptions,
    TranslationConfig,
    TranslationSettings,
)
from workerrss.pipeline import Translator, apply_filters, run_pipeline, translate_items

ARTICLE_PAGE = """
<html><body>
  <article class="content">
    <img src="placeholder.gif" data-src="https://cdn.ex.com/x.png">
    <a href="/rel">more</a>
  </article>
  <div class="ads">ad</div>
</body></html>
"""


def make_items(*titles: str) -> list[FeedItem]:
    return [FeedItem(title=title, link=f"https://ex.com/{index}") for index, title in enumerate(titles)]


class TestFilters:
    """测试过滤规则."""

    def test_exclude_substring(self) -> None:
        """排除规则按子串匹配（忽略大小写）."""
        rules = [FilterRule(field="title", type="substring", value="ad", mode="exclude")]
        result = apply_filters(make_items("Great ad deal", "Normal news"), rules)
        assert [item.title for item in result] == ["Normal news"]

    def test_exclude_wins_over_include(self) -> None:
        """同时命中排除和包含规则时丢弃."""
        rules = [
            FilterRule(value="deal", mode="include"),
            FilterRule(value="great", mode="exclude"),
        ]
        result = apply_filters(make_items("Great deal", "Other deal"), rules)
        assert [item.title for item in result] == ["Other deal"]

    def test_include_requires_a_match(self) -> None:
        """存在包含规则时至少命中一条."""
        rules = [
            FilterRule(type="regex", value=r"^rust\b", mode="include"),
            FilterRule(value="python", mode="include"),
        ]
        result = apply_filters(make_items("Rust 2.0", "Python tips", "Go news"), rules)
        assert [item.title for item in result] == ["Rust 2.0", "Python tips"]

    def test_invalid_regex_is_skipped(self) -> None:
        """非法正则只跳过该规则."""
        rules = [
            FilterRule(type="regex", value="(", mode="exclude"),
            FilterRule(value="news", mode="exclude"),
        ]
        result = apply_filters(make_items("(broken", "Daily news"), rules)
        assert [item.title for item in result] == ["(broken"]

    def test_inactive_rules_are_ignored(self) -> None:
        """未启用的规则不生效."""
        rules = [FilterRule(value="news", mode="exclude", active=False)]
        result = apply_filters(make_items("Daily news"), rules)
        assert len(result) == 1

    def test_camel_case_field_name(self) -> None:
        """字段名支持驼峰写法."""
        items = [
            FeedItem(title="a", pub_date="Mon, 01 Jan 2024 00:00:00 GMT"),
            FeedItem(title="b", pub_date="Mon, 01 Jan 2023 00:00:00 GMT"),
        ]
        rules = [FilterRule(field="pubDate", value="2024", mode="include")]
        assert [item.title for item in apply_filters(items, rules)] == ["a"]

    def test_missing_field_is_empty(self) -> None:
        """缺失字段按空串处理."""
        rules = [FilterRule(field="author", value="bob", mode="include")]
        assert apply_filters(make_items("x"), rules) == []


class TestFullText:
    """测试全文阶段."""

    @pytest.mark.asyncio
    async def test_selector_extraction_fixes_images_and_links(self) -> None:
        """选择器内容替换描述，修正懒加载图片与相对链接."""
        fetcher = FakeFetcher(pages={"https://ex.com/0": ARTICLE_PAGE})
        extractor = FullTextExtractor(fetcher)

        result = await extractor.fetch("https://ex.com/0", "article.content")

        assert result.success is True
        assert 'src="https://cdn.ex.com/x.png"' in result.content_html
        assert 'href="https://ex.com/rel"' in result.content_html
        assert "ads" not in result.content_html

    @pytest.mark.asyncio
    async def test_fetch_failure_returns_error_result(self) -> None:
        """抓取失败不抛异常."""
        fetcher = FakeFetcher(errors={"https://ex.com/0": FetchError("HTTP Error: 503")})
        result = await FullTextExtractor(fetcher).fetch("https://ex.com/0", "article")
        assert result.success is False
        assert "503" in result.error

    @pytest.mark.asyncio
    async def test_pipeline_full_text_with_delay(self) -> None:
        """顺序抓取，请求之间等待，失败条目保留原内容."""
        fetcher = FakeFetcher(pages={"https://ex.com/0": ARTICLE_PAGE})
        items = [
            FeedItem(title="a", link="https://ex.com/0", description="old a"),
            FeedItem(title="b", link="https://ex.com/1", description="old b"),
        ]
        options = PipelineOptions(full_text=True, full_text_selector="article.content")

        with patch("workerrss.pipeline.runner.asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await run_pipeline(
                items,
                options,
                extractor=FullTextExtractor(fetcher),
                settings=Settings(_env_file=None, full_text_delay_ms=200),
            )

        assert fetcher.calls == ["https://ex.com/0", "https://ex.com/1"]
        sleep.assert_awaited_once_with(0.2)
        assert "cdn.ex.com/x.png" in result[0].description
        assert result[1].description == "old b"

    @pytest.mark.asyncio
    async def test_full_text_disabled(self) -> None:
        """未开启全文时不发请求."""
        fetcher = FakeFetcher()
        items = make_items("a")
        result = await run_pipeline(
            items,
            PipelineOptions(),
            extractor=FullTextExtractor(fetcher),
            settings=Settings(_env_file=None),
        )
        assert result == items
        assert fetcher.calls == []


class PrefixTranslator(Translator):
    """测试用翻译器：给文本加前缀，遇到 boom 抛异常."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def translate_text(self, text, config, settings) -> str:
        self.calls.append(text)
        if "boom" in text:
            msg = "translation service down"
            raise RuntimeError(msg)
        return f"{config.target_lang}:{text}"


class TestTranslation:
    """测试翻译阶段."""

    @pytest.mark.asyncio
    async def test_replace_both(self) -> None:
        """默认替换标题和描述."""
        translator = PrefixTranslator()
        items = [FeedItem(title="Hello", description="World")]
        config = TranslationConfig(enabled=True)

        (result,) = await translate_items(items, translator, config)

        assert result.title == "zh:Hello"
        assert result.description == "zh:World"
        assert result.is_translated is True
        assert items[0].is_translated is False

    @pytest.mark.asyncio
    async def test_append_title_only(self) -> None:
        """scope=title 且 format=append."""
        config = TranslationConfig(enabled=True, scope="title", format="append")
        (result,) = await translate_items(
            [FeedItem(title="Hello", description="World")], PrefixTranslator(), config
        )
        assert result.title == "Hello (zh:Hello)"
        assert result.description == "World"

    @pytest.mark.asyncio
    async def test_failure_passes_item_through(self) -> None:
        """单个条目失败时保留原条目，顺序不变."""
        items = make_items("one", "boom", "three", "four")
        config = TranslationConfig(enabled=True, scope="title")

        result = await translate_items(items, PrefixTranslator(), config, concurrency=3)

        assert [item.title for item in result] == ["zh:one", "boom", "zh:three", "zh:four"]
        assert result[1].is_translated is False

    @pytest.mark.asyncio
    async def test_disabled_translation_is_skipped(self) -> None:
        """未启用时不调用翻译服务."""
        translator = PrefixTranslator()
        options = PipelineOptions(translation=TranslationConfig(enabled=False))
        await run_pipeline(
            make_items("x"),
            options,
            translator=translator,
            translation_settings=TranslationSettings(provider="google"),
            settings=Settings(_env_file=None),
        )
        assert translator.calls == []

    @pytest.mark.asyncio
    async def test_filters_run_before_translation(self) -> None:
        """先过滤再翻译."""
        translator = PrefixTranslator()
        options = PipelineOptions(
            filters=[FilterRule(value="skip", mode="exclude")],
            translation=TranslationConfig(enabled=True, scope="title"),
        )
        result = await run_pipeline(
            make_items("keep", "skip me"),
            options,
            translator=translator,
            settings=Settings(_env_file=None),
        )
        assert [item.title for item in result] == ["zh:keep"]
        assert translator.calls == ["keep"]
