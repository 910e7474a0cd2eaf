"""Shared utilities for the lyrics pipeline"""

from .lines import join_lines, number_lines, split_lines
from .parsing import (
    message_text,
    normalize_line_breaks,
    parse_json_object,
    slice_json_object,
    strip_code_fences,
)

__all__ = [
    # Line index
    "split_lines",
    "join_lines",
    "number_lines",
    # Reply repair
    "message_text",
    "strip_code_fences",
    "slice_json_object",
    "parse_json_object",
    "normalize_line_breaks",
]
