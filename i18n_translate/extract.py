"""
Recover a JSON payload from free-form model output.

Models are asked to answer with JSON but regularly wrap it in a markdown
fence or add a sentence before/after it. extract_json_region() cuts out the
part between the first opening bracket and the last closing one.

This is a heuristic, not a parser: brackets are not counted, so a `]` or
`}` inside a string literal after the real payload can shift the end of the
region. Callers must still json.loads() the result and treat a failure as a
malformed response.
"""

from __future__ import annotations

import re

# ```json, ```JSON, ```jsonc, ``` ...
_FENCE_OPEN = re.compile(r"^```[A-Za-z0-9_+-]*")
_FENCE = "```"


def strip_code_fence(text: str) -> str:
    """
    Remove a surrounding markdown code fence, with or without a language tag.

    Text that does not start with a fence is returned unchanged.

        '```json\\n[1]\\n```'  →  '[1]'
        '```\\n{"a": 1}```'    →  '{"a": 1}'
    """
    text = text.strip()
    if not text.startswith(_FENCE):
        return text
    text = _FENCE_OPEN.sub("", text, count=1)
    if text.endswith(_FENCE):
        text = text[: -len(_FENCE)]
    return text.strip()


def extract_json_region(text: str) -> str:
    """
    Return the substring of `text` that most likely holds a JSON array/object.

    The start is the first `[` or `{`, whichever comes first. The end is the
    last `]`, or the last `}` when there is no `]` after the start. Without an
    end the region runs to the end of the text; without a start the (fence
    stripped) text is returned as-is.
    """
    text = strip_code_fence(text)

    starts = [i for i in (text.find("["), text.find("{")) if i >= 0]
    if not starts:
        return text
    start = min(starts)

    end = text.rfind("]")
    if end < start:
        end = text.rfind("}")
    if end > start:
        return text[start: end + 1]
    return text[start:]
