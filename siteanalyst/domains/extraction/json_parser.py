"""
JSON Parser - Best-effort recovery of a JSON value from model output.

Order of attempts:
1. the whole response
2. each fenced code block (```json ... ``` or bare ```)
3. the first {...} or [...] span that decodes, scanning in text order

NaN and Infinity are rejected: they are not JSON and cannot be re-serialized.
"""

from __future__ import annotations

import json
import re
from typing import Any

from siteanalyst.config.errors import MalformedResponseError

__all__ = ["parse_json_response"]

_FENCE_RE = re.compile(r"```[ \t]*(?:json|JSON)?[ \t]*\r?\n?(.*?)```", re.DOTALL)
_OPENER_RE = re.compile(r"[\[{]")


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Non-JSON constant: {token}")


_DECODER = json.JSONDecoder(parse_constant=_reject_constant)


def parse_json_response(text: str) -> Any:
    """
    Parse the first well-formed JSON value found in `text`.

    Raises:
        MalformedResponseError: nothing in the text decodes as JSON
    """
    stripped = text.strip()
    if not stripped:
        raise MalformedResponseError("AI response was empty", text)

    try:
        return _DECODER.decode(stripped)
    except ValueError:
        pass

    for block in _FENCE_RE.findall(stripped):
        try:
            return _DECODER.decode(block.strip())
        except ValueError:
            continue

    for match in _OPENER_RE.finditer(stripped):
        try:
            value, _ = _DECODER.raw_decode(stripped, match.start())
            return value
        except ValueError:
            continue

    raise MalformedResponseError("AI response was not valid JSON", text)
