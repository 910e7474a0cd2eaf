"""
Segmentation stage

Asks the chat model where each song section starts and ends, then repairs the
answer against the real line count: out-of-range line numbers are clamped and
inverted ranges are dropped.
"""

import logging

from langchain_core.messages import HumanMessage, SystemMessage

from ..errors import (
    ModelResponseMalformedError,
    SongLensError,
    TranslationCallFailedError,
)
from .config import PipelineConfig
from .models import ParsedError, ParsedOk, ParseResult, SectionBoundary
from .shared import (
    join_lines,
    message_text,
    number_lines,
    parse_json_object,
    split_lines,
)

logger = logging.getLogger(__name__)

# An empty reply means the model found no sections
EMPTY_SEGMENTATION = '{"sections": []}'


def _as_int(value) -> int | None:
    """Coerce a model-supplied line number, or None if it is not integral"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _clamp(value: int, total_lines: int) -> int:
    return max(1, min(value, total_lines))


def validate_boundaries(
    raw_sections: list, total_lines: int
) -> tuple[list[SectionBoundary], int]:
    """Clamp model boundaries into the document and drop unusable ones

    Order is preserved from the model's answer.

    Args:
        raw_sections: ``sections`` list from the decoded reply
        total_lines: Number of lines in the lyrics

    Returns:
        (valid boundaries, number of discarded entries)
    """
    boundaries = []
    discarded = 0
    for entry in raw_sections:
        if not isinstance(entry, dict):
            discarded += 1
            continue
        start = _as_int(entry.get("startLine"))
        end = _as_int(entry.get("endLine"))
        if start is None or end is None:
            discarded += 1
            continue
        start = _clamp(start, total_lines)
        end = _clamp(end, total_lines)
        if start > end:
            discarded += 1
            continue
        boundaries.append(
            SectionBoundary(
                kind=str(entry.get("type") or "section"),
                start_line=start,
                end_line=end,
            )
        )
    return boundaries, discarded


def parse_segmentation(raw: str, total_lines: int) -> ParseResult:
    """Turn a raw segmentation reply into a tagged parse result"""
    try:
        data = parse_json_object(raw)
    except ModelResponseMalformedError as e:
        return ParsedError(reason=e.message, raw_response=raw, details=e.details)

    raw_sections = data.get("sections")
    if not isinstance(raw_sections, list):
        return ParsedError(
            reason="Segmentation reply has no 'sections' list", raw_response=raw
        )

    boundaries, discarded = validate_boundaries(raw_sections, total_lines)
    return ParsedOk(boundaries=boundaries, discarded=discarded)


async def segment_lyrics(
    llm, lyrics: str, config: PipelineConfig
) -> list[SectionBoundary]:
    """Ask the model for section boundaries and validate them

    Args:
        llm: LangChain chat model (anything with ``ainvoke``)
        lyrics: Full lyrics text
        config: Pipeline configuration providing the prompts

    Returns:
        Validated boundaries in the model's order

    Raises:
        TranslationCallFailedError: If the model call itself fails
        ModelResponseMalformedError: If the reply cannot be parsed
    """
    total_lines = len(split_lines(lyrics))
    logger.info(f"📄 Segmenting lyrics ({total_lines} lines)")

    messages = [
        SystemMessage(content=config.get_segmentation_system_prompt()),
        HumanMessage(
            content=config.get_segmentation_user_prompt(number_lines(lyrics))
        ),
    ]
    try:
        response = await llm.ainvoke(messages)
    except SongLensError:
        raise
    except Exception as e:
        raise TranslationCallFailedError(
            "Segmentation call failed", details=str(e)
        ) from e

    raw = message_text(response)
    logger.debug(f"Raw segmentation reply: {raw}")
    if not raw.strip():
        raw = EMPTY_SEGMENTATION

    result = parse_segmentation(raw, total_lines)
    if isinstance(result, ParsedError):
        raise ModelResponseMalformedError(
            result.reason, details=result.details, raw_response=result.raw_response
        )

    if result.discarded:
        logger.warning(
            f"Discarded {result.discarded} section(s) with unusable line ranges"
        )
    logger.info(f"✓ Found {len(result.boundaries)} section(s)")
    return result.boundaries


def extract_sections(
    lyrics: str, boundaries: list[SectionBoundary]
) -> list[tuple[SectionBoundary, str]]:
    """Slice the lyrics into one text per validated boundary"""
    lines = split_lines(lyrics)
    return [
        (boundary, join_lines(lines, boundary.start_line, boundary.end_line))
        for boundary in boundaries
    ]
