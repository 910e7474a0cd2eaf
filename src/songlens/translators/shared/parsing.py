"""
Repair helpers for chat model replies

Hosted models wrap JSON in markdown fences, surround it with prose and encode
line breaks inconsistently. These helpers recover the payload before it is
validated.
"""

import json
import re

from langchain_core.messages import BaseMessage

from ...errors import ModelResponseMalformedError

_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```$")

# Order matters: double-escaped breaks must go before single backslashes
_LINE_BREAK_REPLACEMENTS = (
    ("\\\\n", "\n"),
    ("\\n", "\n"),
    ("\\", "\n"),
    ("\r\n", "\n"),
    ("\r", "\n"),
)


def message_text(message: BaseMessage) -> str:
    """Return the plain text of a chat model reply

    Some providers return content as a list of parts instead of a string.
    """
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` marker and a trailing ``` marker"""
    text = text.strip()
    text = _FENCE_START.sub("", text)
    text = _FENCE_END.sub("", text)
    return text.strip()


def slice_json_object(text: str) -> str:
    """Cut from the first ``{`` to the last ``}``, dropping surrounding prose"""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        return text[start : end + 1]
    return text


def parse_json_object(raw: str) -> dict:
    """Recover and decode the JSON object embedded in a model reply

    Args:
        raw: Reply text exactly as returned by the model

    Returns:
        The decoded object

    Raises:
        ModelResponseMalformedError: If no JSON object can be decoded
    """
    cleaned = slice_json_object(strip_code_fences(raw))
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ModelResponseMalformedError(
            "Model returned malformed JSON", details=str(e), raw_response=raw
        ) from e
    if not isinstance(data, dict):
        raise ModelResponseMalformedError(
            "Model returned JSON that is not an object",
            details=f"Got {type(data).__name__}",
            raw_response=raw,
        )
    return data


def normalize_line_breaks(text: str) -> str:
    """Collapse every line-break encoding the models produce into ``\\n``

    Handles literal ``\\\\n`` and ``\\n`` escapes, stray backslashes, CRLF and
    bare CR. Applying it twice gives the same result as applying it once.
    """
    for old, new in _LINE_BREAK_REPLACEMENTS:
        text = text.replace(old, new)
    return text
