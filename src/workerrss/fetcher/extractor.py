"""全文提取器."""

import asyncio
import logging
import re

from pydantic import BaseModel
from trafilatura import extract

from workerrss.fetcher.client import DocumentFetcher
from workerrss.utils.html_parser import extract_content

logger = logging.getLogger(__name__)


class FullTextResult(BaseModel):
    """全文抓取结果."""

    success: bool
    content_html: str | None = None
    url: str | None = None  # 实际抓取地址
    error: str | None = None


class FullTextExtractor:
    """抓取文章页面并提取正文 HTML."""

    def __init__(self, fetcher: DocumentFetcher) -> None:
        self.fetcher = fetcher

    async def fetch(
        self,
        url: str,
        selector: str = "",
        encoding: str = "auto",
    ) -> FullTextResult:
        """
        抓取指定 URL 的全文.

        配置了选择器时取选择器匹配的内容，否则交给 trafilatura 识别正文。
        trafilatura 是同步库，这里放到线程里执行。
        """
        try:
            document = await self.fetcher.fetch(url, encoding=encoding)

            if selector:
                html_content = extract_content(document.text, selector, document.url)
            else:
                html_content = await asyncio.to_thread(self._extract_main, document.text, document.url)

            if not html_content or not html_content.strip():
                return FullTextResult(
                    success=False,
                    url=document.url,
                    error="无法从页面内容中提取正文",
                )

            return FullTextResult(
                success=True,
                content_html=self._clean_html(html_content),
                url=document.url,
            )

        except Exception as e:
            logger.warning(f"全文抓取失败 {url}: {e}")
            return FullTextResult(success=False, url=url, error=str(e) or type(e).__name__)

    def _extract_main(self, html: str, url: str) -> str | None:
        return extract(
            html,
            url=url,
            include_comments=False,
            include_tables=True,
            include_images=True,
            include_links=True,
            output_format="html",
            favor_precision=False,
        )

    def _clean_html(self, html: str) -> str:
        """清理 HTML 内容."""
        # 移除多余空白
        html = re.sub(r"\n\s*\n", "\n\n", html)
        return html.strip()
