"""Map an engine finding back onto a character range of the displayed text.

The engine reports a finding as (ordinal object position, field key). The
displayed text is a re-serialized, possibly edited copy of the analysed
source, so byte offsets from the engine would be meaningless here. Instead the
locator counts literal occurrences of the quoted key from the top of the text
and picks the ``object_index``-th one.

This relies on the engine's object traversal order matching the textual
order of the key token. A key that also appears at a deeper nesting level, or
in an object the engine skips, shifts the count and yields a wrong (but
harmless) highlight.
"""

from __future__ import annotations

import json
from typing import NamedTuple

from lens_core.findings import Finding


class TextRange(NamedTuple):
    start: int
    end: int


def key_token(key: str) -> str:
    """Return the key as it appears in JSON text, quotes and escapes included."""
    return json.dumps(str(key), ensure_ascii=False)


def locate(text: str, object_index: int, key: str) -> TextRange | None:
    """Return the range of the ``object_index``-th quoted ``key`` in ``text``, or None."""
    source = str(text or "")
    if object_index < 0 or not source:
        return None
    token = key_token(key)
    width = len(token)
    seen = 0
    pos = source.find(token)
    while pos >= 0:
        if seen == object_index:
            return TextRange(pos, pos + width)
        seen += 1
        pos = source.find(token, pos + width)
    return None


def locate_finding(text: str, finding: Finding) -> TextRange | None:
    return locate(text, finding.object_index, finding.key)


def text_index_for_offset(offset: int) -> str:
    """Tk text index for a character offset from the start of the buffer."""
    return f"1.0+{max(0, int(offset))}c"


def utf16_offset(text: str, offset: int) -> int:
    """Offset counted in UTF-16 units, as Tk 8.6 counts text indices.

    Each character outside the Basic Multilingual Plane occupies two units.
    """
    offset = max(0, int(offset))
    return offset + sum(1 for char in str(text or "")[:offset] if ord(char) > 0xFFFF)
