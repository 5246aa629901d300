"""测试配置和 fixtures."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from workerrss.api.feeds import get_fetcher
from workerrss.config import Settings
from workerrss.fetcher.client import DocumentFetcher, FetchedDocument, FetchError
from workerrss.main import app


class FakeFetcher(DocumentFetcher):
    """按 URL 返回预设文档的抓取器."""

    def __init__(
        self,
        pages: dict[str, str] | None = None,
        errors: dict[str, Exception] | None = None,
        redirects: dict[str, str] | None = None,
    ) -> None:
        self.pages = pages or {}
        self.errors = errors or {}
        self.redirects = redirects or {}
        self.calls: list[str] = []
        self.closed = False

    async def fetch(
        self,
        url: str,
        *,
        encoding: str = "auto",
        headers: dict[str, str] | None = None,
    ) -> FetchedDocument:
        self.calls.append(url)
        if url in self.errors:
            raise self.errors[url]
        if url not in self.pages:
            msg = "HTTP Error: 404"
            raise FetchError(msg, status_code=404)
        return FetchedDocument(text=self.pages[url], url=self.redirects.get(url, url))

    async def close(self) -> None:
        self.closed = True


SAMPLE_HTML = """
<html>
  <head><title>Example Blog</title></head>
  <body>
    <div class="post">
      <h2 class="title">Post 1</h2>
      <a href="/p1">read</a>
      <p class="summary">First <b>post</b></p>
      <span class="date">2024-01-02T03:04:05Z</span>
      <img class="cover" src="/img/1.png">
    </div>
    <div class="post">
      <h2 class="title">Post 2</h2>
      <a href="/p2">read</a>
      <p class="summary">Second post</p>
    </div>
  </body>
</html>
"""

SAMPLE_JSON = """
{
  "data": {
    "list": [
      {"id": 1, "t": "Hello", "url": "/a/1", "body": "<p>one</p>", "ts": 1704067200},
      {"id": 2, "t": "World", "url": "/a/2", "body": "<p>two</p>", "ts": 1704153600}
    ]
  }
}
"""

SAMPLE_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>Upstream RSS</title>
    <link>https://news.example.com/</link>
    <description>Upstream description</description>
    <item>
      <title>First story</title>
      <link>https://news.example.com/1</link>
      <description>short text</description>
      <content:encoded><![CDATA[<p>Full <b>story</b></p>]]></content:encoded>
      <dc:creator>Alice</dc:creator>
      <pubDate>Tue, 02 Jan 2024 10:00:00 GMT</pubDate>
      <guid>story-1</guid>
      <enclosure url="https://news.example.com/1.mp3" length="1234" type="audio/mpeg"/>
    </item>
    <item>
      <title>Second story</title>
      <link>/2</link>
      <description>&amp;lt;p&amp;gt;escaped&amp;lt;/p&amp;gt;</description>
      <pubDate>Mon, 01 Jan 2024 10:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""

SAMPLE_ATOM = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Upstream Atom</title>
  <subtitle>Atom subtitle</subtitle>
  <entry>
    <title>Atom entry</title>
    <link rel="alternate" href="https://atom.example.com/e1"/>
    <link rel="enclosure" href="https://atom.example.com/e1.jpg" type="image/jpeg"/>
    <id>tag:atom.example.com,2024:e1</id>
    <published>2024-01-03T00:00:00Z</published>
    <summary>entry summary</summary>
    <author><name>Bob</name></author>
  </entry>
</feed>
"""


@pytest.fixture
def settings() -> Settings:
    """测试用配置（不读取 .env）."""
    return Settings(_env_file=None, full_text_delay_ms=0)


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher(
        pages={
            "https://ex.com": SAMPLE_HTML,
            "https://api.ex.com/list": SAMPLE_JSON,
            "https://news.example.com/feed": SAMPLE_RSS,
            "https://atom.example.com/feed": SAMPLE_ATOM,
        }
    )


@pytest_asyncio.fixture
async def client(fake_fetcher: FakeFetcher) -> AsyncGenerator[AsyncClient, None]:
    """创建测试用的 HTTP 客户端，抓取器替换为 FakeFetcher."""

    async def override_fetcher() -> AsyncGenerator[DocumentFetcher, None]:
        yield fake_fetcher

    app.dependency_overrides[get_fetcher] = override_fetcher
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
