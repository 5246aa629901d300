"""内容抽取."""

from workerrss.extraction.engine import (
    Extraction,
    ExtractionError,
    extract,
    extract_with_channel,
)
from workerrss.extraction.normalizer import normalize, parse_markup
from workerrss.extraction.paths import interpolate, resolve, resolve_text

__all__ = [
    "Extraction",
    "ExtractionError",
    "extract",
    "extract_with_channel",
    "interpolate",
    "normalize",
    "parse_markup",
    "resolve",
    "resolve_text",
]
