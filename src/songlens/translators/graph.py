"""Lyrics pipeline graph: segment → extract → translate"""

import asyncio
import logging
from typing import Optional

from langgraph.graph import END, StateGraph

from ..errors import SongLensError, TranslationCallFailedError
from .config import PipelineConfig
from .models import PipelineState, Section, SectionBoundary
from .section_translator import translate_section
from .segmenter import extract_sections, segment_lyrics

logger = logging.getLogger(__name__)


def create_initial_state(lyrics: str) -> PipelineState:
    """Create initial state for the pipeline graph"""
    return {
        "lyrics": lyrics,
        "boundaries": None,
        "section_texts": None,
        "sections": None,
        "messages": [],
    }


def _first_error(group: BaseExceptionGroup) -> BaseException:
    """Pick the first leaf exception out of a (possibly nested) group"""
    error = group.exceptions[0]
    while isinstance(error, BaseExceptionGroup):
        error = error.exceptions[0]
    return error


async def translate_all(
    llm,
    section_texts: list[tuple[SectionBoundary, str]],
    config: PipelineConfig,
) -> list[Section]:
    """Translate every section concurrently, all or nothing

    The first failing call cancels the others and is re-raised on its own;
    no partial list is ever returned.
    """
    limit: Optional[asyncio.Semaphore] = None
    if config.max_concurrency:
        limit = asyncio.Semaphore(config.max_concurrency)

    async def run_one(boundary: SectionBoundary, text: str) -> Section:
        if limit is None:
            result = await translate_section(llm, boundary.kind, text, config)
        else:
            async with limit:
                result = await translate_section(llm, boundary.kind, text, config)
        return Section(
            kind=boundary.kind,
            original_text=text,
            translation_text=result.translation_text,
            analysis_text=result.analysis_text,
        )

    try:
        async with asyncio.TaskGroup() as group:
            tasks = [
                group.create_task(run_one(boundary, text))
                for boundary, text in section_texts
            ]
    except BaseExceptionGroup as eg:
        error = _first_error(eg)
        if isinstance(error, SongLensError):
            raise error from None
        raise TranslationCallFailedError(
            "Section translation failed", details=str(error)
        ) from error

    return [task.result() for task in tasks]


def build_graph(llm, config: PipelineConfig):
    """Build the pipeline graph

    Graph structure:
    segment → extract → translate (fan-out, joined) → END

    Args:
        llm: LangChain chat model shared by both stages
        config: Pipeline configuration

    Returns:
        Compiled LangGraph workflow
    """
    graph = StateGraph(PipelineState)

    async def segment_node(state: PipelineState) -> dict:
        boundaries = await segment_lyrics(llm, state["lyrics"], config)
        return {
            "boundaries": boundaries,
            "messages": [f"Segmented into {len(boundaries)} section(s)"],
        }

    def extract_node(state: PipelineState) -> dict:
        section_texts = extract_sections(state["lyrics"], state["boundaries"] or [])
        return {
            "section_texts": section_texts,
            "messages": ["Extracted section texts"],
        }

    async def translate_node(state: PipelineState) -> dict:
        section_texts = state["section_texts"] or []
        logger.info(f"🌐 Translating {len(section_texts)} section(s)...")
        sections = await translate_all(llm, section_texts, config)
        return {
            "sections": sections,
            "messages": [f"Translated {len(sections)} section(s)"],
        }

    graph.add_node("segment", segment_node)
    graph.add_node("extract", extract_node)
    graph.add_node("translate", translate_node)

    graph.add_edge("segment", "extract")
    graph.add_edge("extract", "translate")
    graph.add_edge("translate", END)

    graph.set_entry_point("segment")

    return graph.compile()
