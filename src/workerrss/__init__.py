"""WorkerRSS: 把网页、JSON、XML 转为订阅源."""

__version__ = "0.1.0"
