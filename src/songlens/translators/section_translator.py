"""Translation/analysis stage - one chat model call per section"""

import logging

from langchain_core.messages import HumanMessage, SystemMessage

from ..errors import (
    ModelResponseMalformedError,
    SongLensError,
    TranslationCallFailedError,
)
from .config import PipelineConfig
from .models import SectionTranslation
from .shared import message_text, normalize_line_breaks, parse_json_object

logger = logging.getLogger(__name__)


def parse_section_reply(raw: str) -> SectionTranslation:
    """Decode a translation reply and normalize its line breaks

    Raises:
        ModelResponseMalformedError: If the reply has no usable translation
    """
    data = parse_json_object(raw)

    translation = data.get("translation")
    if not isinstance(translation, str):
        raise ModelResponseMalformedError(
            "Translation reply has no 'translation' string", raw_response=raw
        )
    analysis = data.get("analysis")
    if not isinstance(analysis, str):
        analysis = ""

    return SectionTranslation(
        translation_text=normalize_line_breaks(translation),
        analysis_text=analysis,
    )


async def translate_section(
    llm, kind: str, original_text: str, config: PipelineConfig
) -> SectionTranslation:
    """Translate and analyse a single section

    Args:
        llm: LangChain chat model (anything with ``ainvoke``)
        kind: Section label, used in the prompt
        original_text: Section lyrics
        config: Pipeline configuration providing the prompts

    Returns:
        SectionTranslation with normalized translation text

    Raises:
        TranslationCallFailedError: If the model call fails
        ModelResponseMalformedError: If the reply cannot be parsed
    """
    messages = [
        SystemMessage(content=config.get_translation_system_prompt()),
        HumanMessage(content=config.get_translation_user_prompt(kind, original_text)),
    ]
    try:
        response = await llm.ainvoke(messages)
    except SongLensError:
        raise
    except Exception as e:
        raise TranslationCallFailedError(
            f"Translation call failed for {kind}", details=str(e)
        ) from e

    raw = message_text(response)
    logger.debug(f"Raw translation reply for {kind}: {raw}")
    return parse_section_reply(raw)
