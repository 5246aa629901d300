"""后处理流水线."""

from workerrss.pipeline.filters import apply_filters
from workerrss.pipeline.runner import fetch_full_text, run_pipeline
from workerrss.pipeline.translator import Translator, translate_items

__all__ = [
    "Translator",
    "apply_filters",
    "fetch_full_text",
    "run_pipeline",
    "translate_items",
]
