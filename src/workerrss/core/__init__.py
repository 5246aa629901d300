"""核心业务逻辑."""

from workerrss.core.builder import BuildOutcome, FeedBuilder, RunLog
from workerrss.core.folder import FolderAggregator

__all__ = [
    "BuildOutcome",
    "FeedBuilder",
    "FolderAggregator",
    "RunLog",
]
