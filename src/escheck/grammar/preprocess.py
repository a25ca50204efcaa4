"""Source preparation before grammar evaluation."""

from __future__ import annotations

DIRECTIVE_MARKER = "#!"
_NEUTRALIZED_MARKER = "//"


def has_directive_prefix(raw_text: str) -> bool:
    """Whether the text starts with an interpreter directive (``#!``)."""
    return raw_text.startswith(DIRECTIVE_MARKER)


def prepare_source(raw_text: str, allow_directive_prefix: bool) -> str:
    """Neutralize a leading ``#!`` line when the profile allows one.

    The marker is replaced by a line comment of the same width, so every
    line and column after it keeps its position. Without permission the
    text is returned unchanged and the directive is judged by the grammar.
    """
    if not allow_directive_prefix or not has_directive_prefix(raw_text):
        return raw_text
    return _NEUTRALIZED_MARKER + raw_text[len(DIRECTIVE_MARKER):]
