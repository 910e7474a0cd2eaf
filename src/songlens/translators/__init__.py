"""Lyrics pipeline.

This module provides:
- Section segmentation with a hosted chat model
- Per-section translation and analysis, run concurrently
- Repair of fenced / prose-wrapped JSON replies

Architecture:
    shared: Line index and reply repair helpers
    segmenter: Segmentation stage and section extraction
    section_translator: Translation/analysis stage
    graph: LangGraph workflow wiring the stages together
    LyricsPipelineAgent: Main orchestrator
"""

from .agent import LyricsPipelineAgent, create_chat_model
from .config import PipelineConfig
from .models import (
    ParsedError,
    ParsedOk,
    Section,
    SectionBoundary,
    SectionTranslation,
)

__all__ = [
    "LyricsPipelineAgent",
    "create_chat_model",
    "PipelineConfig",
    "Section",
    "SectionBoundary",
    "SectionTranslation",
    "ParsedOk",
    "ParsedError",
]
