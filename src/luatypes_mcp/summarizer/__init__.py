"""Summarizer package for generating symbol summaries."""

from .summaries import (
    extract_summary_from_description,
    signature_fallback,
    summarize,
    summarize_symbols,
)

__all__ = [
    "extract_summary_from_description",
    "signature_fallback",
    "summarize",
    "summarize_symbols",
]
