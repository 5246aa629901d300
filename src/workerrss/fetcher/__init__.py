"""远程抓取模块."""

from workerrss.fetcher.client import (
    DocumentFetcher,
    FetchedDocument,
    FetchError,
    HttpxFetcher,
)
from workerrss.fetcher.extractor import FullTextExtractor, FullTextResult

__all__ = [
    "DocumentFetcher",
    "FetchError",
    "FetchedDocument",
    "FullTextExtractor",
    "FullTextResult",
    "HttpxFetcher",
]
