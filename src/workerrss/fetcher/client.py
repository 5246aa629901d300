"""远程文档抓取客户端."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

from workerrss.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedDocument:
    """抓取到的文档."""

    text: str
    url: str  # 跟随重定向后的实际地址
    encoding: str | None = None
    content_type: str = ""


class FetchError(Exception):
    """远程抓取失败."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DocumentFetcher(ABC):
    """文档抓取接口."""

    @abstractmethod
    async def fetch(
        self,
        url: str,
        *,
        encoding: str = "auto",
        headers: dict[str, str] | None = None,
    ) -> FetchedDocument:
        """抓取指定 URL，非 2xx 响应抛出 FetchError."""
        ...

    async def close(self) -> None:
        """释放资源."""


class HttpxFetcher(DocumentFetcher):
    """基于 httpx 的抓取实现，模拟浏览器请求头."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self.settings.request_timeout_seconds,
            follow_redirects=True,
        )

    def _default_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": (
                "text/html,application/xhtml+xml,application/xml;q=0.9,"
                "application/json;q=0.9,*/*;q=0.8"
            ),
            "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
            "Accept-Encoding": "gzip, deflate",
            "Cache-Control": "no-cache",
        }

    async def fetch(
        self,
        url: str,
        *,
        encoding: str = "auto",
        headers: dict[str, str] | None = None,
    ) -> FetchedDocument:
        request_headers = self._default_headers()
        if headers:
            request_headers.update(headers)

        try:
            response = await self._client.get(url, headers=request_headers)
        except httpx.HTTPError as e:
            msg = f"请求失败: {e}"
            raise FetchError(msg) from e

        if response.status_code >= 400:
            msg = f"HTTP Error: {response.status_code}"
            raise FetchError(msg, status_code=response.status_code)

        if encoding and encoding.lower() != "auto":
            try:
                text = response.content.decode(encoding, errors="replace")
            except LookupError:
                logger.warning(f"未知编码 {encoding}，改用自动检测")
                text = response.text
                encoding = response.encoding or "auto"
        else:
            text = response.text
            encoding = response.encoding

        return FetchedDocument(
            text=text,
            url=str(response.url),
            encoding=encoding,
            content_type=response.headers.get("content-type", ""),
        )

    async def close(self) -> None:
        """关闭客户端."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxFetcher":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
