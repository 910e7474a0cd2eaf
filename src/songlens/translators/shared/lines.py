"""Line index over raw lyrics text.

Lines are split on line feeds only and numbered from 1. Everything here is
pure; callers clamp ranges before slicing.
"""


def split_lines(text: str) -> list[str]:
    """Split lyrics into lines on ``\\n`` boundaries."""
    return text.split("\n")


def join_lines(lines: list[str], start: int, end: int) -> str:
    """Join lines ``start..end`` (1-indexed, inclusive) with ``\\n``

    Args:
        lines: Lines as returned by :func:`split_lines`
        start: First line number
        end: Last line number

    Returns:
        The selected lines rejoined

    Raises:
        ValueError: If the range is not integral or falls outside the lines
    """
    for value in (start, end):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Line numbers must be integers, got {value!r}")
    if not 1 <= start <= end <= len(lines):
        raise ValueError(
            f"Line range [{start}, {end}] outside document of {len(lines)} lines"
        )
    return "\n".join(lines[start - 1 : end])


def number_lines(text: str) -> str:
    """Prefix every line with its 1-indexed number, e.g. ``[Line 3] ...``"""
    return "\n".join(
        f"[Line {i}] {line}" for i, line in enumerate(split_lines(text), 1)
    )
