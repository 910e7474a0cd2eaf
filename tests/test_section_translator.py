"""Tests for the section translation stage"""

import pytest

from songlens.errors import ModelResponseMalformedError, TranslationCallFailedError
from songlens.translators.section_translator import parse_section_reply, translate_section

from conftest import ScriptedChatModel


def test_double_escaped_line_breaks_become_real_ones():
    result = parse_section_reply(r'{"translation": "Hola\\\\nMundo", "analysis": "A greeting"}')
    assert result.translation_text == "Hola\nMundo"
    assert result.analysis_text == "A greeting"


def test_literal_backslash_n_in_json_is_normalized():
    # JSON source "Hola\\nMundo" decodes to a literal backslash + n
    result = parse_section_reply(r'{"translation": "Hola\\nMundo", "analysis": ""}')
    assert result.translation_text == "Hola\nMundo"


def test_missing_analysis_defaults_to_empty():
    result = parse_section_reply('{"translation": "Hello"}')
    assert result.analysis_text == ""


@pytest.mark.parametrize(
    "raw", ['{"analysis": "only analysis"}', '{"translation": 42}', "not json"]
)
def test_unusable_reply_is_malformed(raw):
    with pytest.raises(ModelResponseMalformedError):
        parse_section_reply(raw)


async def test_translate_section_prompt_carries_section_text(config):
    llm = ScriptedChatModel(
        segmentation="",
        translations={
            "Bonjour": '```json\n{"translation": "Hello\\nWorld", "analysis": "Greeting"}\n```'
        },
    )
    result = await translate_section(llm, "verse", "Bonjour\nle monde", config)

    assert result.translation_text == "Hello\nWorld"
    assert "Bonjour\nle monde" in llm.prompts[0]


async def test_translate_section_wraps_model_errors(config):
    llm = ScriptedChatModel(segmentation="", translations={"Bonjour": TimeoutError("timed out")})
    with pytest.raises(TranslationCallFailedError) as exc_info:
        await translate_section(llm, "chorus", "Bonjour", config)
    assert "chorus" in exc_info.value.message
